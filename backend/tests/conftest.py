"""
Pytest configuration and shared fixtures for the parts sync tests.

Provides mock clients, stores, services, and sample catalog data.
Version: 1.0.0
"""
import os

os.environ.setdefault("AUTO_START_CELERY", "false")
os.environ.setdefault("CRON_JOB_ENABLED", "false")

import pytest
from unittest.mock import AsyncMock, MagicMock

from partsync.schemas.parts import (
    CatalogCredentials,
    EnrichmentBundle,
    RemotePart,
    ResolvedMedia,
    SyncedPartRecord,
)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_settings():
    """Settings object with test defaults (no real credentials)."""
    from partsync.core.config import Settings
    return Settings(
        shopify_store_domain="test-store.myshopify.com",
        shopify_access_token="shpat_test_token",
        shopify_api_version="2025-01",
        parts_api_username="test-user",
        parts_api_password="test-pass",
        parts_api_user_token="test-token",
        parts_api_endpoint="https://catalog.test/v2/get/parts",
        parts_api_base_url="https://catalog.test",
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-supabase-key",
        aws_s3_bucket_name="test-bucket",
        aws_region="us-east-1",
        http_timeout_seconds=5,
    )


@pytest.fixture
def credentials():
    return CatalogCredentials(username="test-user", password="test-pass", user_token="test-token")


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_part_data():
    """Raw catalog payload for one in-stock part."""
    return {
        "id": "P1",
        "name": "Bumper",
        "notes": "Front bumper, minor scratches",
        "photo": "http://cdn/x.jpg",
        "original_price": "120.00",
        "price": "99.00",
        "manufacturer_code": "MC-778",
        "car_id": 501,
        "category_id": 42,
        "status": "0",
    }


@pytest.fixture
def sample_part(sample_part_data):
    return RemotePart.model_validate(sample_part_data)


@pytest.fixture
def sample_enrichment():
    return EnrichmentBundle(
        model_name="Golf",
        year_start="2008",
        year_end="2012",
        brand_id="7",
        brand_name="Volkswagen",
        category_label="Bumpers",
    )


@pytest.fixture
def synced_record_for():
    """Build the record a successful create would have stored for a part."""
    from partsync.utils.product_mapper import build_create_payload

    def _build(part, enrichment, product_id="gid://shopify/Product/1", **overrides):
        payload = build_create_payload(part, enrichment, ResolvedMedia(), location_id="gid://shopify/Location/1")
        data = dict(
            rrr_part_id=part.id,
            shopify_product_id=product_id,
            shopify_variant_id="gid://shopify/ProductVariant/11",
            shopify_inventory_item_id="gid://shopify/InventoryItem/111",
            metafields=payload.metafield_values,
            title=payload.title,
            price=payload.variant.price,
            barcode=payload.variant.barcode,
            description=payload.description_html,
            media=[],
            media_ids=["gid://shopify/MediaImage/9"],
            photo_refs=part.photo_refs,
        )
        data.update(overrides)
        return SyncedPartRecord(**data)

    return _build


# ---------------------------------------------------------------------------
# Clients (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_shopify_client():
    """Mocked ShopifyClient (HTTP transport only)."""
    client = MagicMock()
    client.call_shopify = AsyncMock(return_value={})
    client.call_shopify_graphql = AsyncMock(return_value={})
    client.run_mutation = AsyncMock(return_value={})
    client.to_gid = MagicMock(
        side_effect=lambda entity, val: val if str(val).startswith("gid://") else f"gid://shopify/{entity}/{val}"
    )
    return client


@pytest.fixture
def mock_catalog_client():
    client = MagicMock()
    client.build_credentials = MagicMock(
        return_value=CatalogCredentials(username="u", password="p", user_token="t")
    )
    client.fetch_parts_page = AsyncMock(return_value={"data": [], "pagination": {"total_count": 0}})
    client.fetch_car = AsyncMock(return_value=[[{"car_model": 900}]])
    client.fetch_car_models = AsyncMock(return_value=[
        {"id": "900", "name": "Golf", "year_start": 2008, "year_end": 2012, "brand": "7"},
    ])
    client.fetch_car_brands = AsyncMock(return_value=[{"id": "7", "name": "Volkswagen"}])
    client.fetch_categories = AsyncMock(return_value=[{"id": "42", "en": "Bumpers"}])
    return client


# ---------------------------------------------------------------------------
# Services and stores (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_gateway():
    gateway = MagicMock()
    gateway.get_default_location_id = AsyncMock(return_value="gid://shopify/Location/1")
    gateway.create_product = AsyncMock(return_value={
        "product_id": "gid://shopify/Product/1",
        "variant_id": "gid://shopify/ProductVariant/11",
        "inventory_item_id": "gid://shopify/InventoryItem/111",
        "media_ids": ["gid://shopify/MediaImage/9"],
    })
    gateway.update_product = AsyncMock(return_value={
        "product_id": "gid://shopify/Product/1",
        "media_ids": ["gid://shopify/MediaImage/10"],
    })
    gateway.delete_media = AsyncMock(return_value=[])
    gateway.set_product_status = AsyncMock(return_value=None)
    gateway.get_available_quantity = AsyncMock(return_value=0)
    gateway.adjust_inventory = AsyncMock(return_value=None)
    return gateway


@pytest.fixture
def mock_synced_store():
    store = MagicMock()
    store.load_snapshot = AsyncMock(return_value={})
    store.get_by_part_id = AsyncMock(return_value=None)
    store.insert_record = AsyncMock(return_value=None)
    store.merge_record = AsyncMock(return_value=None)
    return store


@pytest.fixture
def mock_raw_store():
    store = MagicMock()
    store.upsert_part = AsyncMock(return_value=None)
    return store


@pytest.fixture
def mock_media_store():
    store = MagicMock()
    store.upload = AsyncMock(side_effect=lambda name, body, ext: (f"https://bucket.test/images/{name}", f"images/{name}"))
    store.release = AsyncMock(return_value=0)
    store.purge_all = AsyncMock(return_value=0)
    return store


@pytest.fixture
def mock_browser_fetcher():
    fetcher = MagicMock()
    fetcher.fetch_remote_bytes = AsyncMock(return_value=b"\x89PNG-bytes")
    fetcher.aclose = AsyncMock(return_value=None)
    return fetcher


@pytest.fixture
def mock_supabase():
    """Mock SupabaseClient with a chained table builder: (client, table)."""
    supabase_client = MagicMock()
    mock_table = MagicMock()
    mock_table.select.return_value = mock_table
    mock_table.insert.return_value = mock_table
    mock_table.upsert.return_value = mock_table
    mock_table.update.return_value = mock_table
    mock_table.eq.return_value = mock_table
    mock_table.execute.return_value = MagicMock(data=[])
    supabase_client.client.table.return_value = mock_table
    return supabase_client, mock_table
