"""Tests for DeliveryService negotiation logic."""

import gzip

import pytest
from cli_download_server.config import CHUNK_SIZE
from cli_download_server.context import ServerContext
from cli_download_server.errors import ArtifactNotFoundError, StreamInitError
from cli_download_server.integrations.artifact_store.fake import FakeArtifactStore
from cli_download_server.models.descriptor import FileDescriptor
from cli_download_server.registry import MetadataRegistry
from cli_download_server.services.delivery_service import DeliveryService

A_CONTENT = b"hello"
LARGE_CONTENT = bytes(range(256)) * (CHUNK_SIZE // 64)


def _descriptor(name: str, mime: str = "text/plain") -> FileDescriptor:
    return FileDescriptor(name=name, mime=mime, size=0, platform="linux")


class TestDeliveryService:
    """Tests for DeliveryService.deliver."""

    @pytest.fixture
    def store(self) -> FakeArtifactStore:
        return FakeArtifactStore(
            files={
                "a.txt.gz": gzip.compress(A_CONTENT, mtime=0),
                "large.bin.gz": gzip.compress(LARGE_CONTENT, mtime=0),
                "plain.txt.gz": b"this is not gzip data",
                "empty.txt.gz": b"",
                "truncated.txt.gz": gzip.compress(A_CONTENT, mtime=0)[:12],
                "unregistered.txt.gz": gzip.compress(b"secret", mtime=0),
            },
            directories={"dir.gz"},
        )

    @pytest.fixture
    def service(self, store: FakeArtifactStore) -> DeliveryService:
        registry = MetadataRegistry(
            [
                _descriptor("a.txt"),
                _descriptor("large.bin", "application/octet-stream"),
                _descriptor("plain.txt"),
                _descriptor("empty.txt"),
                _descriptor("truncated.txt"),
                _descriptor("dir"),
                _descriptor("no-artifact.txt"),
            ]
        )
        return DeliveryService(ServerContext(registry=registry, artifact_store=store))

    def test_decompresses_without_gzip(self, service: DeliveryService) -> None:
        delivery = service.deliver("a.txt", [])

        assert b"".join(delivery.body) == A_CONTENT
        assert delivery.content_encoding is None
        assert delivery.media_type == "text/plain"
        assert delivery.headers["Content-Disposition"] == 'attachment; filename="a.txt"'

    def test_passes_through_with_gzip(self, service: DeliveryService) -> None:
        delivery = service.deliver("a.txt", ["deflate, gzip"])

        body = b"".join(delivery.body)
        assert body == gzip.compress(A_CONTENT, mtime=0)
        assert gzip.decompress(body) == A_CONTENT
        assert delivery.content_encoding == "gzip"
        assert delivery.media_type == "text/plain"
        assert delivery.headers["Content-Disposition"] == 'attachment; filename="a.txt"'

    @pytest.mark.parametrize("accept_encoding", [[], ["gzip"]])
    def test_serves_stored_artifact_verbatim(
        self, service: DeliveryService, accept_encoding: list[str]
    ) -> None:
        delivery = service.deliver("a.txt.gz", accept_encoding)

        assert b"".join(delivery.body) == gzip.compress(A_CONTENT, mtime=0)
        assert delivery.content_encoding is None
        assert delivery.media_type == "application/gzip"
        assert "Content-Disposition" not in delivery.headers

    def test_streams_in_bounded_chunks(self, service: DeliveryService) -> None:
        delivery = service.deliver("large.bin", [])

        chunks = list(delivery.body)
        assert len(chunks) > 1
        assert all(len(chunk) <= CHUNK_SIZE for chunk in chunks)
        assert b"".join(chunks) == LARGE_CONTENT

    @pytest.mark.parametrize(
        "requested_path",
        ["unknown.txt", "unknown.txt.gz", "unregistered.txt", "unregistered.txt.gz", ""],
    )
    def test_unknown_name_not_found(
        self, service: DeliveryService, store: FakeArtifactStore, requested_path: str
    ) -> None:
        with pytest.raises(ArtifactNotFoundError):
            service.deliver(requested_path, ["gzip"])

        assert store.opened == []

    @pytest.mark.parametrize("requested_path", ["sub/a.txt", "sub/a.txt.gz", "/a.txt", "a.txt/"])
    def test_sub_directory_not_found(
        self, service: DeliveryService, store: FakeArtifactStore, requested_path: str
    ) -> None:
        with pytest.raises(ArtifactNotFoundError, match="sub-directories"):
            service.deliver(requested_path, ["gzip"])

        assert store.opened == []

    @pytest.mark.parametrize("requested_path", ["dir", "dir.gz"])
    @pytest.mark.parametrize("accept_encoding", [[], ["gzip"]])
    def test_directory_not_found(
        self, service: DeliveryService, requested_path: str, accept_encoding: list[str]
    ) -> None:
        with pytest.raises(ArtifactNotFoundError, match="directory"):
            service.deliver(requested_path, accept_encoding)

    @pytest.mark.parametrize("requested_path", ["no-artifact.txt", "no-artifact.txt.gz"])
    def test_missing_artifact_not_found(
        self, service: DeliveryService, requested_path: str
    ) -> None:
        with pytest.raises(ArtifactNotFoundError, match="missing"):
            service.deliver(requested_path, [])

    @pytest.mark.parametrize("name", ["plain.txt", "empty.txt", "truncated.txt"])
    def test_corrupt_artifact_fails_stream_init(
        self, service: DeliveryService, store: FakeArtifactStore, name: str
    ) -> None:
        with pytest.raises(StreamInitError) as exc_info:
            service.deliver(name, [])

        assert exc_info.value.file_name == f"{name}.gz"
        assert store.open_handle_count == 0

    def test_corrupt_artifact_passes_through_with_gzip(self, service: DeliveryService) -> None:
        delivery = service.deliver("plain.txt", ["gzip"])

        assert b"".join(delivery.body) == b"this is not gzip data"
        assert delivery.content_encoding == "gzip"

    @pytest.mark.parametrize(
        ("requested_path", "accept_encoding"),
        [("a.txt", []), ("a.txt", ["gzip"]), ("a.txt.gz", [])],
    )
    def test_handle_closed_after_body_consumed(
        self,
        service: DeliveryService,
        store: FakeArtifactStore,
        requested_path: str,
        accept_encoding: list[str],
    ) -> None:
        delivery = service.deliver(requested_path, accept_encoding)
        assert store.open_handle_count == 1

        list(delivery.body)

        assert store.open_handle_count == 0

    def test_close_releases_unconsumed_body(
        self, service: DeliveryService, store: FakeArtifactStore
    ) -> None:
        delivery = service.deliver("large.bin", ["gzip"])

        delivery.close()

        assert store.open_handle_count == 0

    def test_decoder_closed_after_body_consumed(self, service: DeliveryService) -> None:
        delivery = service.deliver("a.txt", [])
        assert delivery.reader is not None

        list(delivery.body)

        assert delivery.reader.closed

    def test_close_releases_unconsumed_decoder(
        self, service: DeliveryService, store: FakeArtifactStore
    ) -> None:
        delivery = service.deliver("large.bin", [])
        assert delivery.reader is not None

        delivery.close()

        assert delivery.reader.closed
        assert store.open_handle_count == 0

    def test_non_latin_name_gets_encoded_disposition(self) -> None:
        store = FakeArtifactStore(files={"файл.gz": gzip.compress(A_CONTENT, mtime=0)})
        registry = MetadataRegistry([_descriptor("файл")])
        service = DeliveryService(ServerContext(registry=registry, artifact_store=store))

        delivery = service.deliver("файл", [])

        assert "filename*=UTF-8''%D1%84%D0%B0%D0%B9%D0%BB" in delivery.headers["Content-Disposition"]
        assert b"".join(delivery.body) == A_CONTENT
