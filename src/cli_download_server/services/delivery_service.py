"""Negotiated delivery of gzip artifacts.

Given a requested name, resolve it against the metadata registry and the
artifact store, then stream the stored bytes either as-is (the client
accepts gzip, or asked for the ".gz" file itself) or through a gzip
decoder. Every path reads in fixed-size chunks.
"""

import gzip
import logging
import zlib
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import BinaryIO

from cli_download_server.config import CHUNK_SIZE
from cli_download_server.context import ServerContext
from cli_download_server.errors import ArtifactNotFoundError, StreamInitError
from cli_download_server.integrations.artifact_store.abc import ArtifactKind
from cli_download_server.negotiation import (
    GZIP_CODING,
    accepts_gzip,
    artifact_name,
    content_disposition,
    has_separator,
    is_compressed_name,
    logical_name,
)

logger = logging.getLogger(__name__)

GZIP_MEDIA_TYPE = "application/gzip"
GZIP_MAGIC = b"\x1f\x8b"


@dataclass(frozen=True)
class Delivery:
    """A resolved download, ready to be written to the client.

    The body iterator owns the artifact handle and closes it when it is
    exhausted; close() releases it when the body is never consumed.
    """

    file_name: str
    body: Iterator[bytes]
    handle: BinaryIO = field(repr=False)
    headers: dict[str, str] = field(default_factory=dict)
    reader: gzip.GzipFile | None = field(default=None, repr=False)

    @property
    def media_type(self) -> str:
        return self.headers["Content-Type"]

    @property
    def content_encoding(self) -> str | None:
        return self.headers.get("Content-Encoding")

    def close(self) -> None:
        if self.reader is not None:
            self.reader.close()
        self.handle.close()


def _iter_chunks(reader: BinaryIO, handle: BinaryIO) -> Iterator[bytes]:
    with handle:
        while True:
            chunk = reader.read(CHUNK_SIZE)
            if not chunk:
                return
            yield chunk


def _iter_decompressed(
    first_chunk: bytes, reader: gzip.GzipFile, handle: BinaryIO
) -> Iterator[bytes]:
    with handle, reader:
        if first_chunk:
            yield first_chunk
        yield from _iter_chunks(reader, handle)


class DeliveryService:
    """Resolves requested file names to streamed deliveries."""

    def __init__(self, ctx: ServerContext) -> None:
        """Create DeliveryService with server context.

        Args:
            ctx: Server context with the registry and artifact store
        """
        self._ctx = ctx

    def deliver(self, requested_path: str, accept_encoding: Iterable[str]) -> Delivery:
        """Resolve a request for a file under the download prefix.

        Args:
            requested_path: Path with the download prefix already stripped
            accept_encoding: Every Accept-Encoding header value sent

        Returns:
            Delivery with headers and a chunked body

        Raises:
            ArtifactNotFoundError: Sub-directory path, unknown logical name,
                missing artifact, or a directory in place of the artifact
            StreamInitError: The artifact is not readable as gzip
        """
        logger.info(f"File request. File name: {requested_path}")
        if has_separator(requested_path):
            logger.warning(f"Wrong path: includes sub-directories; Requested path: {requested_path}")
            raise ArtifactNotFoundError(requested_path, "path includes sub-directories")

        name = logical_name(requested_path)
        descriptor = self._ctx.registry.get(name)
        if descriptor is None:
            raise ArtifactNotFoundError(requested_path, "unknown file")

        if is_compressed_name(requested_path):
            handle = self._open(requested_path, requested_path)
            logger.info(f"serving stored artifact {requested_path}")
            return Delivery(
                file_name=requested_path,
                body=_iter_chunks(handle, handle),
                handle=handle,
                headers={"Content-Type": GZIP_MEDIA_TYPE},
            )

        stored_name = artifact_name(name)
        handle = self._open(requested_path, stored_name)
        headers = {
            "Content-Disposition": content_disposition(name),
            "Content-Type": descriptor.mime,
        }

        if accepts_gzip(accept_encoding):
            headers["Content-Encoding"] = GZIP_CODING
            logger.info(f"serving compressed file {stored_name}")
            return Delivery(
                file_name=stored_name,
                body=_iter_chunks(handle, handle),
                handle=handle,
                headers=headers,
            )

        logger.info(f"serving non-compressed file {stored_name}")
        reader, first_chunk = self._open_gzip_reader(stored_name, handle)
        return Delivery(
            file_name=stored_name,
            body=_iter_decompressed(first_chunk, reader, handle),
            handle=handle,
            headers=headers,
            reader=reader,
        )

    def _open(self, requested_path: str, file_name: str) -> BinaryIO:
        kind = self._ctx.artifact_store.classify(file_name)
        if kind is not ArtifactKind.FILE:
            logger.warning(f"File not found. File name: {file_name} ({kind.value})")
            raise ArtifactNotFoundError(requested_path, f"artifact is {kind.value}")
        try:
            return self._ctx.artifact_store.open_artifact(file_name)
        except OSError as err:
            logger.warning(f"File not found. File name: {file_name}; {err}")
            raise ArtifactNotFoundError(requested_path, "artifact can't be opened") from err

    def _open_gzip_reader(self, file_name: str, handle: BinaryIO) -> tuple[gzip.GzipFile, bytes]:
        """Wrap the artifact in a gzip decoder and decode the first chunk.

        Decoding the first chunk up front surfaces header and early data
        errors before any response bytes are sent.
        """
        try:
            magic = handle.read(len(GZIP_MAGIC))
            if magic != GZIP_MAGIC:
                raise gzip.BadGzipFile(f"Not a gzipped file ({magic!r})")
            handle.seek(0)
            reader = gzip.GzipFile(fileobj=handle, mode="rb")
            first_chunk = reader.read(CHUNK_SIZE)
        except (OSError, EOFError, zlib.error) as err:
            handle.close()
            logger.error(f"Can't get gzip reader for {file_name}: {err}")
            raise StreamInitError(file_name, err) from err
        return reader, first_chunk
