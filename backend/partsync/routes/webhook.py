"""
Webhook routes — inbound part status changes from the catalog.

Version: 1.0.0
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from partsync.container import get_webhook_service
from partsync.schemas.webhook import WebhookResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["webhook"])


@router.post("/webhook", response_model=WebhookResponse)
async def receive_webhook(body: Dict[str, Any] = Body(...)):
    try:
        await get_webhook_service().dispatch(body)
    except Exception as e:
        logger.error(f"webhook dispatch failed: {e}")
        return JSONResponse(status_code=500, content={"message": "Internal server error"})
    return WebhookResponse(message="Part status changed successfully.")
