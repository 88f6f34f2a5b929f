"""Artifact store integration."""

from cli_download_server.integrations.artifact_store.abc import ArtifactKind, ArtifactStore
from cli_download_server.integrations.artifact_store.fake import FakeArtifactStore

__all__ = ["ArtifactKind", "ArtifactStore", "FakeArtifactStore"]
