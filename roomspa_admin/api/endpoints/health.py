"""Health check endpoints."""

from typing import Annotated

import httpx
import structlog
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from roomspa_admin.config import settings
from roomspa_admin.dependencies import get_http_client

logger = structlog.get_logger()

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    environment: str


class DetailedHealthResponse(HealthResponse):
    """Health check including the admin API."""

    backend: str


async def check_backend_connection(http: httpx.AsyncClient) -> bool:
    """Any HTTP answer from the admin API root counts as reachable."""
    try:
        await http.get("")
    except httpx.HTTPError as e:
        logger.error("backend_health_check_failed", error=str(e))
        return False
    return True


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Basic health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
    )


@router.get(
    "/health/detailed",
    response_model=DetailedHealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Detailed health check",
)
async def detailed_health_check(
    http: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> DetailedHealthResponse:
    """
    Health check that also calls the admin API.

    Returns:
        ``healthy`` when the backend answers, ``degraded`` otherwise
    """
    backend_healthy = await check_backend_connection(http)
    return DetailedHealthResponse(
        status="healthy" if backend_healthy else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        backend="healthy" if backend_healthy else "unhealthy",
    )


@router.get(
    "/ping",
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Simple ping",
)
async def ping() -> dict[str, str]:
    return {"message": "pong"}
