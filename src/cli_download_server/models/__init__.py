"""Data models for the download server."""

from cli_download_server.models.descriptor import FileDescriptor, normalize_platform

__all__ = ["FileDescriptor", "normalize_platform"]
