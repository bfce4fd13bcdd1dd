"""API v1 router aggregation."""

from fastapi import APIRouter

from guessr.api.v1.routers import maps, preview

api_router = APIRouter()

# Include all v1 routers
api_router.include_router(maps.router)  # Map page and play redirect
api_router.include_router(preview.router)  # WebSocket for the rotating preview
