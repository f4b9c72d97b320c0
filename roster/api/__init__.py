"""API routes, mounted under settings.API_PREFIX."""

from fastapi import APIRouter

from roster.api import auth, health, players

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(players.router, prefix="/players", tags=["players"])
