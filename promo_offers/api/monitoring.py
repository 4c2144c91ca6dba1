"""Health, readiness and Prometheus endpoints."""
import logging

from fastapi import APIRouter, HTTPException, status
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest
from sqlalchemy import text
from starlette.responses import Response

from promo_offers.config import settings
from promo_offers.infrastructure.database import async_session_factory

logger = logging.getLogger(__name__)

router = APIRouter(tags=["monitoring"])


@router.get("/health")
async def health() -> dict:
    """Liveness probe."""
    return {"status": "healthy", "service": settings.app_name}


@router.get("/ready")
async def ready() -> dict:
    """Readiness probe: the offers database answers."""
    try:
        async with async_session_factory() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database is not reachable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"code": "DATABASE_UNAVAILABLE", "message": "Database is not reachable"},
        )
    return {"status": "ready"}


@router.get("/metrics")
async def metrics() -> Response:
    if not settings.enable_metrics:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Metrics are disabled")
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
    )
