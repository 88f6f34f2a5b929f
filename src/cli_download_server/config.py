"""Server configuration from environment variables."""

import os
import re
from dataclasses import dataclass
from pathlib import Path

from cli_download_server.errors import ConfigError

FILE_SERVER_API_PATH = "/files/cli/"
HEALTH_API_PATH = "/health"
READY_API_PATH = "/ready"
COMPRESSED_SUFFIX = ".gz"
CHUNK_SIZE = 64 * 1024

DEFAULT_PORT = 8080
MAX_PORT = 65535

_PORT_PATTERN = re.compile(r"[+-]?[0-9]+")


def validate_port(port: str) -> int:
    """Parse a port number, making sure it is numeric and in range.

    Args:
        port: Raw value, usually taken from the environment

    Returns:
        The port as an integer

    Raises:
        ConfigError: If the value is not a base-10 integer in 1..65535
    """
    if _PORT_PATTERN.fullmatch(port) is None:
        raise ConfigError(f"wrong port format; {port!r}")
    value = int(port)
    if value <= 0 or value > MAX_PORT:
        raise ConfigError(f"wrong port number; {value}")
    return value


@dataclass(frozen=True)
class ServerConfig:
    """Server configuration loaded from environment variables."""

    host: str
    port: int
    file_server_dir: Path
    metadata_path: Path | None
    debug: bool

    @staticmethod
    def from_env() -> "ServerConfig":
        """Load configuration from environment variables."""
        metadata_path = os.environ.get("METADATA_PATH")
        return ServerConfig(
            host=os.environ.get("SERVER_HOST", "0.0.0.0"),
            port=validate_port(os.environ.get("SERVER_PORT", str(DEFAULT_PORT))),
            file_server_dir=Path(os.environ.get("FILE_SERVER_DIR", "files")),
            metadata_path=Path(metadata_path) if metadata_path else None,
            debug=os.environ.get("SERVER_DEBUG", "false").lower() == "true",
        )
