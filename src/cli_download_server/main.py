"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response

from cli_download_server.boot import boot
from cli_download_server.config import FILE_SERVER_API_PATH, ServerConfig
from cli_download_server.context import ServerContext
from cli_download_server.logging_setup import configure_logging
from cli_download_server.routes.files import router as files_router
from cli_download_server.routes.health import router as health_router
from cli_download_server.routes.index import router as index_router

logger = logging.getLogger(__name__)

ALLOWED_FILE_METHODS = ("GET", "HEAD")
ALLOW_HEADER = "OPTIONS, GET, HEAD"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup.

    Runs the boot sequence and stores the production context. Boot errors
    propagate, so the server never starts accepting connections.
    """
    config = ServerConfig.from_env()
    app.state.context = boot(config)
    yield


async def filter_methods(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Restrict the download prefix to GET and HEAD, answering OPTIONS itself."""
    if not request.url.path.startswith(FILE_SERVER_API_PATH):
        return await call_next(request)

    if request.method in ALLOWED_FILE_METHODS:
        return await call_next(request)
    if request.method == "OPTIONS":
        return Response(status_code=204, headers={"Allow": ALLOW_HEADER})

    logger.warning(f"unsupported method: {request.method}")
    return Response(status_code=405, headers={"Allow": ALLOW_HEADER})


def create_app(context: ServerContext | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        context: Optional ServerContext for testing. If None, uses lifespan
                 to boot the production context.

    Returns:
        Configured FastAPI application
    """
    if context is not None:
        # Test mode: use provided context, no lifespan
        app = FastAPI(
            title="CLI Download Server",
            description="Serves gzip-stored command line tools",
            version="0.1.0",
        )
        app.state.context = context
    else:
        # Production mode: use lifespan for DI
        app = FastAPI(
            title="CLI Download Server",
            description="Serves gzip-stored command line tools",
            version="0.1.0",
            lifespan=lifespan,
        )

    app.middleware("http")(filter_methods)

    app.include_router(files_router)
    app.include_router(health_router)
    app.include_router(index_router)

    return app


def run() -> None:
    """Run the server (entry point for CLI)."""
    config = ServerConfig.from_env()
    configure_logging(config.debug)
    serve(config)


def serve(config: ServerConfig) -> None:
    """Boot and serve until interrupted.

    Boot happens here rather than in the lifespan handler so that startup
    errors surface before uvicorn binds the port.
    """
    app = create_app(boot(config))
    logger.info(f"Starting the CLI Download server on port {config.port}")
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    run()
