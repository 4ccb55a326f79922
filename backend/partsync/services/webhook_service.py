"""
Webhook service — reacts to catalog status-change events.

"in_warehouse" adds one unit at the default location; any other status
zeroes the available quantity there. Only envelope parsing errors reach
the caller; everything after dispatch is logged with the part id and
swallowed.
Version: 1.0.0
"""
import logging
from typing import Any, Dict

from partsync.core.constants.publishing import WAREHOUSE_RESTOCK_DELTA, WAREHOUSE_STATUS
from partsync.db.synced_part_store import SyncedPartStore
from partsync.schemas.webhook import PartStatusEventData, WebhookEvent
from partsync.services.shopify_gateway import ShopifyGateway

logger = logging.getLogger("webhook_service")


class WebhookService:
    def __init__(self, synced_store: SyncedPartStore, gateway: ShopifyGateway) -> None:
        self._synced_store = synced_store
        self._gateway = gateway

    async def dispatch(self, body: Dict[str, Any]) -> None:
        """Parse and route one inbound event; malformed envelopes raise."""
        event = WebhookEvent.from_body(body)
        change = event.status_change()
        if change is None:
            logger.info("webhook ignored event_type=%s", event.event_type)
            return
        try:
            await self.apply_status_change(change)
        except Exception as e:
            logger.error("webhook part_id=%s status=%s failed: %s", change.part_id, change.status, e)

    async def apply_status_change(self, change: PartStatusEventData) -> None:
        record = await self._synced_store.get_by_part_id(change.part_id)
        if record is None:
            logger.info("webhook part_id=%s not synced, ignoring", change.part_id)
            return
        if not record.shopify_inventory_item_id:
            logger.warning("webhook part_id=%s has no inventory item, ignoring", change.part_id)
            return

        location_id = await self._gateway.get_default_location_id()
        item_id = record.shopify_inventory_item_id

        if change.status.strip().lower() == WAREHOUSE_STATUS:
            await self._gateway.adjust_inventory(item_id, location_id, WAREHOUSE_RESTOCK_DELTA)
            logger.info("webhook part_id=%s restocked +%d", change.part_id, WAREHOUSE_RESTOCK_DELTA)
            return

        available = await self._gateway.get_available_quantity(item_id, location_id)
        if available <= 0:
            logger.info("webhook part_id=%s already at %d available, nothing to zero", change.part_id, available)
            return
        await self._gateway.adjust_inventory(item_id, location_id, -available)
        logger.info("webhook part_id=%s status=%s zeroed %d", change.part_id, change.status, available)
