"""Health check endpoints."""

from datetime import datetime

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.v1.schemas.common import to_wire_timestamp
from core.config import settings
from infrastructure.database.session import get_async_session

logger = structlog.get_logger()

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None
    identity_provider: str | None = None


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """Liveness probe. Does not touch any dependency."""
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        timestamp=to_wire_timestamp(datetime.utcnow()) or "",
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Readiness check including database connectivity.

    The identity provider is only reported as configured or not; salon
    owner lookups fail with IDENTITY_PROVIDER_ERROR while it is missing.
    """
    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.warning("health_database_unreachable", error_type=type(e).__name__)
        db_status = "unhealthy"

    idp_status = (
        "configured"
        if settings.supabase_url and settings.supabase_service_role_key
        else "not_configured"
    )

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        version=settings.app_version,
        timestamp=to_wire_timestamp(datetime.utcnow()) or "",
        environment=settings.app_env,
        database=db_status,
        identity_provider=idp_status,
    )
