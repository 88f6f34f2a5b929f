"""Liveness and readiness probes."""

from fastapi import APIRouter, Response

from cli_download_server.config import HEALTH_API_PATH, READY_API_PATH

router = APIRouter(tags=["health"])


@router.get(HEALTH_API_PATH)
async def health() -> Response:
    return Response(status_code=200)


@router.get(READY_API_PATH)
async def ready() -> Response:
    return Response(status_code=200)
