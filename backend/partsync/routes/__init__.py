"""
Route aggregator — mounts every router at the root.

Version: 1.0.0
"""
from fastapi import APIRouter

from partsync.routes.health import router as health_router
from partsync.routes.sync import router as sync_router
from partsync.routes.webhook import router as webhook_router

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(webhook_router)
api_router.include_router(sync_router)

__all__ = ["api_router", "health_router", "sync_router", "webhook_router"]
