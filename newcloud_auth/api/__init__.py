"""HTTP routes. Everything except /health lives under the auth prefix."""

from fastapi import APIRouter

from newcloud_auth.api import auth, health, teams, users

router = APIRouter()
router.include_router(auth.router, tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(teams.router, prefix="/teams", tags=["teams"])

__all__ = ["health", "router"]
