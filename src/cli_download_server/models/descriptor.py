"""File descriptor data model."""

from dataclasses import dataclass

# Raw OS labels that get a display name at load time
_PLATFORM_LABELS = {"darwin": "macOS"}


def normalize_platform(raw: str) -> str:
    """Map a raw OS label to its display label."""
    return _PLATFORM_LABELS.get(raw, raw)


@dataclass(frozen=True)
class FileDescriptor:
    """Metadata for one downloadable file.

    The size is the uncompressed length in bytes and is informational
    only; it is never checked against the stored artifact.
    """

    name: str
    mime: str
    size: int
    platform: str
