"""Server context for dependency injection."""

from dataclasses import dataclass

from cli_download_server.integrations.artifact_store.abc import ArtifactStore
from cli_download_server.integrations.artifact_store.fake import FakeArtifactStore
from cli_download_server.models.descriptor import FileDescriptor
from cli_download_server.registry import MetadataRegistry


@dataclass(frozen=True)
class ServerContext:
    """Server context containing all dependencies.

    This is a frozen dataclass built once at boot. The registry is
    read-only, so the context is shared by every request without locking.
    Use for_test() for testing scenarios.
    """

    registry: MetadataRegistry
    artifact_store: ArtifactStore

    @classmethod
    def for_test(
        cls,
        *,
        descriptors: list[FileDescriptor] | None = None,
        files: dict[str, bytes] | None = None,
        directories: set[str] | None = None,
    ) -> "ServerContext":
        """Create a test context with fake implementations.

        Args:
            descriptors: Registry entries, in document order
            files: Stored artifacts for FakeArtifactStore (name -> gzip bytes)
            directories: Names that exist as directories in the store

        Returns:
            ServerContext with fake implementations
        """
        return cls(
            registry=MetadataRegistry(descriptors or []),
            artifact_store=FakeArtifactStore(files=files, directories=directories),
        )
