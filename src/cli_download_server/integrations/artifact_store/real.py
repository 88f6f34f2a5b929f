"""Filesystem-backed artifact store implementation."""

import os
import stat
from pathlib import Path
from typing import BinaryIO

from cli_download_server.integrations.artifact_store.abc import ArtifactKind, ArtifactStore


class RealArtifactStore(ArtifactStore):
    """Production store reading gzip artifacts from one flat directory."""

    def __init__(self, root: Path) -> None:
        """Create RealArtifactStore.

        Args:
            root: Directory holding the "<name>.gz" artifacts
        """
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, file_name: str) -> Path:
        return self._root / file_name

    def classify(self, file_name: str) -> ArtifactKind:
        try:
            mode = self._path(file_name).stat().st_mode
        except (FileNotFoundError, NotADirectoryError):
            return ArtifactKind.MISSING
        if stat.S_ISDIR(mode):
            return ArtifactKind.DIRECTORY
        if stat.S_ISREG(mode):
            return ArtifactKind.FILE
        return ArtifactKind.MISSING

    def open_artifact(self, file_name: str) -> BinaryIO:
        handle = self._path(file_name).open("rb")
        if not stat.S_ISREG(os.fstat(handle.fileno()).st_mode):
            handle.close()
            raise FileNotFoundError(f"Not a regular file: {file_name}")
        return handle
