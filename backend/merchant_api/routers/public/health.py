"""
Health check endpoints for the merchant API.
Provides basic and detailed health status of the service and its storage.
"""

import asyncio

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from shared.config.settings import settings
from shared.utils.health import (
    aggregate_health_checks,
    health_check_with_timeout,
    probe_directory,
)


router = APIRouter(prefix="/api", tags=["health"])

SERVICE_NAME = "merchant-api"


@router.get("/health")
def health_check():
    """
    Basic health check endpoint.
    Returns service status without checking storage.
    """
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "environment": settings.environment,
    }


@health_check_with_timeout(timeout=2.0, component="data_dir")
async def check_data_dir_health() -> dict:
    """Collections directory exists and is writable."""
    return await asyncio.to_thread(probe_directory, settings.data_dir, "*.json")


@health_check_with_timeout(timeout=2.0, component="reports_dir")
async def check_reports_dir_health() -> dict:
    """Report artifacts directory exists and is writable."""
    settings.reports_dir.mkdir(parents=True, exist_ok=True)
    return await asyncio.to_thread(probe_directory, settings.reports_dir)


@router.get("/health/detailed")
async def detailed_health_check():
    """
    Detailed health check of the storage directories.

    Returns 503 Service Unavailable if any check fails.
    """
    health_results = await aggregate_health_checks([
        check_data_dir_health(),
        check_reports_dir_health(),
    ])

    checks = {
        "service": SERVICE_NAME,
        "environment": settings.environment,
        "status": health_results["status"],
        "dependencies": health_results["components"],
    }

    if health_results["status"] != "healthy":
        return JSONResponse(content=checks, status_code=503)
    return checks
