"""Health check endpoints."""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from backend.api.deps import GameRegistryDep, HistoryStoreDep, Settings

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthCheckResponse(BaseModel):
    """Basic health check response."""

    status: str
    service: str


class DeepHealthCheckResponse(BaseModel):
    """Deep health check response with component status."""

    status: str
    service: str
    timestamp: str
    checks: dict[str, dict[str, Any]]


@router.get("/health", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Health check endpoint for load balancers and monitoring."""
    return HealthCheckResponse(status="healthy", service="musiq")


@router.get("/health/deep", response_model=DeepHealthCheckResponse)
async def deep_health_check(
    registry: GameRegistryDep,
    history: HistoryStoreDep,
    settings: Settings,
) -> DeepHealthCheckResponse:
    """Deep health check covering the game registry and score history.

    Checks:
    - Games: Active game count against the configured limit
    - History: Saved games can be read (unreadable files count as empty)
    """
    checks: dict[str, dict[str, Any]] = {}

    active = len(registry)
    checks["games"] = {
        "status": "healthy",
        "message": f"{active} of {settings.max_active_games} game slots in use",
    }

    records = history.load()
    checks["history"] = {
        "status": "healthy",
        "message": f"{len(records)} games saved",
    }

    return DeepHealthCheckResponse(
        status="healthy",
        service="musiq",
        timestamp=datetime.now(UTC).isoformat(),
        checks=checks,
    )
