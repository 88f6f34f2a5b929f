"""HTTP route handler for file downloads."""

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from cli_download_server.config import FILE_SERVER_API_PATH
from cli_download_server.errors import ArtifactNotFoundError, StreamInitError
from cli_download_server.services.delivery_service import DeliveryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])


def get_delivery_service(request: Request) -> DeliveryService:
    """Get DeliveryService bound to the app's server context."""
    return DeliveryService(request.app.state.context)


# Sync handler: opening the artifact and priming the gzip decoder block on
# disk I/O, so FastAPI runs this in its threadpool.
@router.api_route(FILE_SERVER_API_PATH + "{file_path:path}", methods=["GET", "HEAD"])
def get_file(request: Request, file_path: str) -> StreamingResponse:
    """Stream a stored file, decompressing it unless the client accepts gzip."""
    service = get_delivery_service(request)
    try:
        delivery = service.deliver(file_path, request.headers.getlist("accept-encoding"))
    except ArtifactNotFoundError as err:
        raise HTTPException(status_code=404, detail="File not found") from err
    except StreamInitError as err:
        raise HTTPException(status_code=500, detail="Something went wrong") from err

    logger.debug(f"streaming {delivery.file_name} for {file_path}")
    try:
        return StreamingResponse(
            delivery.body,
            headers=delivery.headers,
            background=BackgroundTask(delivery.close),
        )
    except BaseException:
        delivery.close()
        raise
