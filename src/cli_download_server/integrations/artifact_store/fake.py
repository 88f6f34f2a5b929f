"""Fake in-memory artifact store for testing."""

import io
from typing import BinaryIO

from cli_download_server.integrations.artifact_store.abc import ArtifactKind, ArtifactStore


class FakeArtifactStore(ArtifactStore):
    """In-memory fake implementation for testing.

    All state is provided via constructor using keyword arguments.
    Opened names are tracked for test assertions.
    """

    def __init__(
        self,
        *,
        files: dict[str, bytes] | None = None,
        directories: set[str] | None = None,
    ) -> None:
        """Create FakeArtifactStore.

        Args:
            files: Mapping of file name -> stored (compressed) bytes
            directories: Names that exist as directories
        """
        self._files = dict(files or {})
        self._directories = set(directories or ())
        self._opened: list[str] = []
        self._handles: list[io.BytesIO] = []

    @property
    def opened(self) -> list[str]:
        """File names opened so far, in order."""
        return self._opened.copy()

    @property
    def open_handle_count(self) -> int:
        """Number of handles returned by open_artifact that are still open."""
        return sum(1 for handle in self._handles if not handle.closed)

    def classify(self, file_name: str) -> ArtifactKind:
        if file_name in self._directories:
            return ArtifactKind.DIRECTORY
        if file_name in self._files:
            return ArtifactKind.FILE
        return ArtifactKind.MISSING

    def open_artifact(self, file_name: str) -> BinaryIO:
        if file_name not in self._files or file_name in self._directories:
            raise FileNotFoundError(file_name)
        self._opened.append(file_name)
        handle = io.BytesIO(self._files[file_name])
        self._handles.append(handle)
        return handle
