"""Health check endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from infrastructure.database.session import get_async_session

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None


def _response(status: str, database: str | None = None) -> HealthResponse:
    return HealthResponse(
        status=status,
        version=settings.app_version,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
        database=database,
    )


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """Liveness probe; does not touch the store."""
    return _response("healthy")


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """Readiness probe: pings the store the profiles and listings live in."""
    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        db_status = f"unhealthy: {type(e).__name__}"

    return _response("healthy" if db_status == "healthy" else "degraded", db_status)
