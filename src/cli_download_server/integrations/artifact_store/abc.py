"""Abstract base class for the compressed artifact store."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import BinaryIO


class ArtifactKind(str, Enum):
    """What a file name resolves to inside the store."""

    FILE = "file"
    DIRECTORY = "directory"
    MISSING = "missing"


class ArtifactStore(ABC):
    """Abstract interface over the flat directory of gzip artifacts.

    File names passed in are bare names (no separators); the store never
    resolves nested paths.

    Implementations include:
    - FakeArtifactStore: In-memory for testing
    - RealArtifactStore: Directory on the local filesystem
    """

    @abstractmethod
    def classify(self, file_name: str) -> ArtifactKind:
        """Resolve a file name to FILE, DIRECTORY or MISSING.

        Args:
            file_name: Bare file name, e.g. "a.txt.gz"

        Returns:
            The kind of entry found under that name
        """
        ...

    @abstractmethod
    def open_artifact(self, file_name: str) -> BinaryIO:
        """Open a regular file for binary reading.

        The caller owns the returned handle and must close it.

        Args:
            file_name: Bare file name previously classified as FILE

        Returns:
            A readable binary stream

        Raises:
            FileNotFoundError: If the file disappeared or is not a regular file
        """
        ...
