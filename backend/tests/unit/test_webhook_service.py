"""
Unit tests for WebhookService — inventory reactions to status changes.

Version: 1.0.0
"""
import pytest
from pydantic import ValidationError
from unittest.mock import AsyncMock

from partsync.core.exceptions import ExternalAPIError
from partsync.schemas.webhook import PartStatusEventData
from partsync.services.webhook_service import WebhookService


def _event(part_id="P1", status="sold"):
    return {
        "event": {
            "event_type": "part.status.changed",
            "event_data": {"part_id": part_id, "status": status},
        }
    }


@pytest.fixture
def service(mock_synced_store, mock_gateway):
    return WebhookService(mock_synced_store, mock_gateway)


@pytest.fixture
def synced_p1(mock_synced_store, sample_part, sample_enrichment, synced_record_for):
    record = synced_record_for(sample_part, sample_enrichment)
    mock_synced_store.get_by_part_id = AsyncMock(return_value=record)
    return record


@pytest.mark.unit
class TestApplyStatusChange:

    @pytest.mark.asyncio
    async def test_sold_zeroes_available_quantity(self, service, synced_p1, mock_gateway):
        mock_gateway.get_available_quantity = AsyncMock(return_value=5)

        await service.dispatch(_event(status="sold"))

        mock_gateway.get_available_quantity.assert_awaited_once_with(
            "gid://shopify/InventoryItem/111", "gid://shopify/Location/1"
        )
        mock_gateway.adjust_inventory.assert_awaited_once_with(
            "gid://shopify/InventoryItem/111", "gid://shopify/Location/1", -5
        )

    @pytest.mark.asyncio
    async def test_nothing_available_means_no_adjustment(self, service, synced_p1, mock_gateway):
        mock_gateway.get_available_quantity = AsyncMock(return_value=0)
        await service.dispatch(_event(status="sold"))
        mock_gateway.adjust_inventory.assert_not_called()

    @pytest.mark.parametrize("status", ["in_warehouse", " IN_WAREHOUSE "])
    @pytest.mark.asyncio
    async def test_in_warehouse_adds_one(self, service, synced_p1, mock_gateway, status):
        await service.dispatch(_event(status=status))

        mock_gateway.adjust_inventory.assert_awaited_once_with(
            "gid://shopify/InventoryItem/111", "gid://shopify/Location/1", 1
        )
        mock_gateway.get_available_quantity.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_part_is_ignored(self, service, mock_synced_store, mock_gateway):
        await service.dispatch(_event(part_id="NOPE"))

        mock_synced_store.get_by_part_id.assert_awaited_once_with("NOPE")
        mock_gateway.adjust_inventory.assert_not_called()

    @pytest.mark.asyncio
    async def test_record_without_inventory_item_is_ignored(
        self, service, mock_synced_store, mock_gateway, sample_part, sample_enrichment, synced_record_for,
    ):
        mock_synced_store.get_by_part_id = AsyncMock(
            return_value=synced_record_for(sample_part, sample_enrichment, shopify_inventory_item_id=None)
        )
        await service.apply_status_change(PartStatusEventData(part_id="P1", status="sold"))
        mock_gateway.adjust_inventory.assert_not_called()


@pytest.mark.unit
class TestDispatch:

    @pytest.mark.asyncio
    async def test_bare_envelope_is_accepted(self, service, synced_p1, mock_gateway):
        body = {"event_type": "part.status.changed", "event_data": {"part_id": 1, "status": "in_warehouse"}}
        await service.dispatch(body)
        mock_gateway.adjust_inventory.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_other_event_types_are_ignored(self, service, mock_synced_store, mock_gateway):
        await service.dispatch({"event": {"event_type": "part.price.changed", "event_data": {}}})
        mock_synced_store.get_by_part_id.assert_not_called()
        mock_gateway.adjust_inventory.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_event_type_raises(self, service):
        with pytest.raises(ValidationError):
            await service.dispatch({"event": {"event_data": {}}})

    @pytest.mark.asyncio
    async def test_missing_status_raises(self, service):
        with pytest.raises(ValidationError):
            await service.dispatch({"event": {"event_type": "part.status.changed", "event_data": {"part_id": "P1"}}})

    @pytest.mark.asyncio
    async def test_gateway_failure_is_swallowed(self, service, synced_p1, mock_gateway):
        mock_gateway.adjust_inventory = AsyncMock(side_effect=ExternalAPIError("Shopify", "boom", status_code=502))
        await service.dispatch(_event(status="in_warehouse"))
        mock_gateway.adjust_inventory.assert_awaited_once()
