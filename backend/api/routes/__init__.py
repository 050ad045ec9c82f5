"""API routes for MusIQ."""

from fastapi import APIRouter

from backend.api.routes.games import router as games_router
from backend.api.routes.health import router as health_router
from backend.api.routes.history import router as history_router

router = APIRouter()

# Include all route modules
router.include_router(health_router, tags=["health"])
router.include_router(games_router, prefix="/games", tags=["games"])
router.include_router(history_router, prefix="/history", tags=["history"])
