"""
Lazy DI container — singleton access to clients, stores, and services.

Works in both FastAPI (async) and Celery (sync) contexts. The sync
engine is built fresh per run around a caller-owned BrowserFetcher,
because the browser is bound to the event loop that launched it.
Version: 1.0.0
"""

from functools import lru_cache

from partsync.core.config import settings
from partsync.clients.browser_fetcher import BrowserFetcher
from partsync.clients.catalog_client import CatalogClient
from partsync.clients.s3_client import S3Client
from partsync.clients.shopify_client import ShopifyClient
from partsync.clients.supabase_client import SupabaseClient
from partsync.db.media_store import MediaStore
from partsync.db.raw_part_store import RawPartStore
from partsync.db.synced_part_store import SyncedPartStore
from partsync.services.catalog_fetcher import CatalogFetcher
from partsync.services.enrichment_resolver import EnrichmentResolver
from partsync.services.media_resolver import MediaResolver
from partsync.services.shopify_gateway import ShopifyGateway
from partsync.services.sync_engine import SyncEngine
from partsync.services.webhook_service import WebhookService


# -- Clients ---------------------------------------------------------------

@lru_cache(maxsize=1)
def get_supabase_client():
    return SupabaseClient(settings)


@lru_cache(maxsize=1)
def get_shopify_client():
    return ShopifyClient(settings)


@lru_cache(maxsize=1)
def get_catalog_client():
    return CatalogClient(settings)


@lru_cache(maxsize=1)
def get_s3_client():
    return S3Client(settings)


# -- DB Stores -------------------------------------------------------------

@lru_cache(maxsize=1)
def get_raw_part_store():
    return RawPartStore(get_supabase_client())


@lru_cache(maxsize=1)
def get_synced_part_store():
    return SyncedPartStore(get_supabase_client())


@lru_cache(maxsize=1)
def get_media_store():
    return MediaStore(get_s3_client())


# -- Services --------------------------------------------------------------

@lru_cache(maxsize=1)
def get_shopify_gateway():
    return ShopifyGateway(get_shopify_client())


@lru_cache(maxsize=1)
def get_webhook_service():
    return WebhookService(synced_store=get_synced_part_store(), gateway=get_shopify_gateway())


def build_sync_engine(fetcher: BrowserFetcher) -> SyncEngine:
    catalog_client = get_catalog_client()
    return SyncEngine(
        catalog_client=catalog_client,
        fetcher=CatalogFetcher(catalog_client),
        enrichment=EnrichmentResolver(catalog_client),
        media=MediaResolver(
            fetcher,
            get_media_store(),
            inverted=settings.media_rehost_inverted,
        ),
        gateway=ShopifyGateway(get_shopify_client()),
        raw_store=get_raw_part_store(),
        synced_store=get_synced_part_store(),
        media_store=get_media_store(),
        page_size=settings.parts_page_size,
    )
