"""
Monitoring Routes

Liveness check for the admin UI and Prometheus metrics.
"""

import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from webflow_cms.config import settings

router = APIRouter(tags=["Monitoring"])

APP_START_TIME = time.time()


class HealthStatus(BaseModel):
    """Health check response model."""

    status: str
    message: str
    timestamp: str
    version: str
    uptime_seconds: float
    webflow_configured: bool
    default_site_id: Optional[str] = None


@router.get("/api/health", response_model=HealthStatus)
async def health_check() -> HealthStatus:
    """
    Liveness probe endpoint.

    The admin UI calls this on load to confirm the backend is reachable.
    It never calls Webflow. `default_site_id` is the configured
    WEBFLOW_SITE_ID the dashboard opens with.
    """
    return HealthStatus(
        status="OK",
        message="Server is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.app_version,
        uptime_seconds=round(time.time() - APP_START_TIME, 2),
        webflow_configured=bool(settings.webflow_access_token),
        default_site_id=settings.webflow_site_id,
    )


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
