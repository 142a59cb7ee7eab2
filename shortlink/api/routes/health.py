"""Service banner and health check endpoints."""

import time

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.config import settings
from shortlink.db.base import DatabaseHealthCheck
from shortlink.db.session import get_db

router = APIRouter(tags=["health"])


@router.get("/", summary="Service banner")
async def root():
    return {"message": "URL Shortener Service is running!"}


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Get system health status",
)
async def health_check(db: AsyncSession = Depends(get_db)):
    """Check health of the service and its database."""
    database = await DatabaseHealthCheck.check_connection(db)
    return {
        "status": "healthy" if database["status"] == "healthy" else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
        "timestamp": time.time(),
        "components": {"database": database},
    }


@router.get(
    "/health/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
)
async def liveness_probe():
    """Simple check that application is running."""
    return {"alive": True}
