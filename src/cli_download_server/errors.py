"""Exception types for the download server.

Service code raises these and stays HTTP-agnostic; the route layer maps
them to status codes.
"""


class CliDownloadServerError(Exception):
    """Base class for all download server errors."""


class ConfigError(CliDownloadServerError):
    """Raised when environment configuration is invalid."""


class MetadataDecodeError(CliDownloadServerError):
    """Raised when the descriptor document cannot be decoded."""


class ArtifactNotFoundError(CliDownloadServerError):
    """Raised when a requested file cannot be served.

    Covers unknown logical names, sub-directory paths, missing artifacts
    and directories sitting where an artifact is expected.
    """

    def __init__(self, requested_path: str, reason: str) -> None:
        self.requested_path = requested_path
        self.reason = reason
        super().__init__(f"{requested_path}: {reason}")


class StreamInitError(CliDownloadServerError):
    """Raised when a stored artifact cannot be opened as a gzip stream."""

    def __init__(self, file_name: str, cause: Exception) -> None:
        self.file_name = file_name
        self.cause = cause
        super().__init__(f"Can't get gzip reader for {file_name}: {cause}")
