"""Boot sequence: build the production context from configuration."""

import logging

from cli_download_server.compression import compress_files
from cli_download_server.config import ServerConfig
from cli_download_server.context import ServerContext
from cli_download_server.integrations.artifact_store.real import RealArtifactStore
from cli_download_server.registry import (
    MetadataRegistry,
    load_bundled_registry,
    load_registry_from_path,
)

logger = logging.getLogger(__name__)


def load_configured_registry(config: ServerConfig) -> MetadataRegistry:
    """Load the registry from METADATA_PATH, or the bundled document if unset."""
    if config.metadata_path is not None:
        return load_registry_from_path(config.metadata_path)
    return load_bundled_registry()


def boot(config: ServerConfig) -> ServerContext:
    """Prepare everything the server needs before accepting connections.

    Compresses newly added files, then loads the metadata registry. Any
    failure propagates and aborts startup.
    """
    compress_files(config.file_server_dir)
    registry = load_configured_registry(config)
    store = RealArtifactStore(config.file_server_dir)
    logger.info(f"Loaded metadata for {len(registry)} files; artifacts in {store.root}")
    return ServerContext(registry=registry, artifact_store=store)
