"""Metadata registry: logical file name -> FileDescriptor.

The registry is decoded once at boot from a JSON array of descriptor
records and is read-only afterwards, so request handlers share it
without locking.
"""

import logging
from collections.abc import Iterator, Mapping
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import BinaryIO

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError, field_validator

from cli_download_server.errors import MetadataDecodeError
from cli_download_server.models.descriptor import FileDescriptor, normalize_platform

logger = logging.getLogger(__name__)

BUNDLED_METADATA = "files.json"


class _DescriptorRecord(BaseModel):
    """Wire shape of a single record in the descriptor document."""

    model_config = ConfigDict(strict=True, extra="ignore")

    name: str
    mime: str
    size: int = 0
    os: str = ""

    @field_validator("mime")
    @classmethod
    def mime_is_ascii(cls, value: str) -> str:
        # Sent verbatim as the Content-Type header value
        if not value.isascii():
            raise ValueError("mime must be ASCII")
        return value

    def to_descriptor(self) -> FileDescriptor:
        return FileDescriptor(
            name=self.name,
            mime=self.mime,
            size=self.size,
            platform=normalize_platform(self.os),
        )


_RECORDS_ADAPTER = TypeAdapter(list[_DescriptorRecord])


class MetadataRegistry(Mapping[str, FileDescriptor]):
    """Read-only mapping from logical name to descriptor.

    Entries are indexed in document order, so a later record with the
    same name replaces an earlier one.
    """

    def __init__(self, descriptors: list[FileDescriptor]) -> None:
        entries: dict[str, FileDescriptor] = {}
        for descriptor in descriptors:
            entries[descriptor.name] = descriptor
        self._entries = MappingProxyType(entries)

    def __getitem__(self, name: str) -> FileDescriptor:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"MetadataRegistry({sorted(self._entries)!r})"

    def sorted_descriptors(self) -> list[FileDescriptor]:
        """Return all descriptors ordered by name."""
        return [self._entries[name] for name in sorted(self._entries)]


def load_registry(stream: BinaryIO) -> MetadataRegistry:
    """Decode a descriptor document into a registry.

    The whole document is decoded before anything is indexed; a single
    malformed record fails the load.

    Args:
        stream: Binary stream containing a JSON array of records

    Returns:
        The populated registry

    Raises:
        MetadataDecodeError: If the document is not valid JSON or any
            record does not match the descriptor shape
    """
    try:
        records = _RECORDS_ADAPTER.validate_json(stream.read())
    except ValidationError as err:
        raise MetadataDecodeError(f"Invalid descriptor document: {err}") from err

    return MetadataRegistry([record.to_descriptor() for record in records])


def load_registry_from_path(path: Path) -> MetadataRegistry:
    """Load the registry from a descriptor document on disk."""
    logger.info(f"Loading file metadata from {path}")
    with path.open("rb") as stream:
        return load_registry(stream)


def load_bundled_registry() -> MetadataRegistry:
    """Load the registry from the descriptor document shipped with the package."""
    document = resources.files("cli_download_server.metadata").joinpath(BUNDLED_METADATA)
    with document.open("rb") as stream:
        return load_registry(stream)
