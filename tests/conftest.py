"""Pytest configuration and fixtures."""

import gzip
from collections.abc import AsyncIterator

import pytest
from cli_download_server.context import ServerContext
from cli_download_server.integrations.artifact_store.fake import FakeArtifactStore
from cli_download_server.main import create_app
from cli_download_server.models.descriptor import FileDescriptor
from cli_download_server.registry import MetadataRegistry
from httpx import ASGITransport, AsyncClient

A_CONTENT = b"hello"
B_CONTENT = b"b file content\n" * 10_000


@pytest.fixture
def descriptors() -> list[FileDescriptor]:
    """Registry entries shared by most tests."""
    return [
        FileDescriptor(name="a.txt", mime="text/plain", size=len(A_CONTENT), platform="linux"),
        FileDescriptor(name="b.txt", mime="text/plain", size=len(B_CONTENT), platform="macOS"),
        FileDescriptor(name="dir", mime="application/octet-stream", size=0, platform="linux"),
        FileDescriptor(name="missing.bin", mime="application/octet-stream", size=1, platform="linux"),
        FileDescriptor(name="corrupt.txt", mime="text/plain", size=5, platform="windows"),
    ]


@pytest.fixture
def registry(descriptors: list[FileDescriptor]) -> MetadataRegistry:
    return MetadataRegistry(descriptors)


@pytest.fixture
def fake_artifact_store() -> FakeArtifactStore:
    """Create a FakeArtifactStore holding a.txt.gz, b.txt.gz and a corrupt artifact."""
    return FakeArtifactStore(
        files={
            "a.txt.gz": gzip.compress(A_CONTENT, mtime=0),
            "b.txt.gz": gzip.compress(B_CONTENT, mtime=0),
            "corrupt.txt.gz": b"not gzip at all",
        },
        directories={"dir.gz"},
    )


@pytest.fixture
def server_context(
    registry: MetadataRegistry, fake_artifact_store: FakeArtifactStore
) -> ServerContext:
    """Create a ServerContext with fake implementations."""
    return ServerContext(registry=registry, artifact_store=fake_artifact_store)


@pytest.fixture
async def async_client(server_context: ServerContext) -> AsyncIterator[AsyncClient]:
    """Create an async test client that sends no Accept-Encoding by default."""
    app = create_app(context=server_context)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        del client.headers["accept-encoding"]
        yield client
