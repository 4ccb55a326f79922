"""
Sync engine — one reconciliation pass from the catalog into Shopify.

Per run:
1. Load every synced record into memory; it answers "already created?"
   and "what changed?" for the whole pass.
2. Stream catalog pages. Parts are processed one at a time: unknown ids
   are created, known ids are diffed and updated (or left alone).
3. After a complete pass, synced records whose id never appeared are
   orphans and their Shopify products are set to DRAFT. Local rows are
   never deleted.

Any error inside one part is logged with the part id and the pass moves
on. Only credentials, the initial snapshot load and the first catalog
page can abort a run. Nothing here retries; the Celery task does.

A Shopify mutation that succeeded but whose local write failed is
logged at CRITICAL: the next run may create a duplicate product.
Version: 1.0.0
"""
import logging
from typing import Dict, Optional, Set

from partsync.clients.catalog_client import CatalogClient
from partsync.core.constants.publishing import STATUS_DRAFT
from partsync.core.exceptions import LocalStoreError, MediaFetchError
from partsync.db.media_store import MediaStore
from partsync.db.raw_part_store import RawPartStore
from partsync.db.synced_part_store import SyncedPartStore
from partsync.schemas.parts import (
    CatalogCredentials,
    RemotePart,
    ResolvedMedia,
    SkipSignal,
    SyncedPartRecord,
)
from partsync.schemas.publishing import NoChange
from partsync.schemas.sync import PartOutcome, SyncRunReport
from partsync.services.catalog_fetcher import CatalogFetcher
from partsync.services.enrichment_resolver import EnrichmentResolver
from partsync.services.media_resolver import MediaResolver
from partsync.services.shopify_gateway import ShopifyGateway
from partsync.utils.product_mapper import build_create_payload, build_update_payload, record_changes

logger = logging.getLogger("sync_engine")


class SyncEngine:
    def __init__(
        self,
        catalog_client: CatalogClient,
        fetcher: CatalogFetcher,
        enrichment: EnrichmentResolver,
        media: MediaResolver,
        gateway: ShopifyGateway,
        raw_store: RawPartStore,
        synced_store: SyncedPartStore,
        media_store: MediaStore,
        page_size: int = 100,
    ) -> None:
        self._catalog_client = catalog_client
        self._fetcher = fetcher
        self._enrichment = enrichment
        self._media = media
        self._gateway = gateway
        self._raw_store = raw_store
        self._synced_store = synced_store
        self._media_store = media_store
        self._page_size = page_size

    async def run(self, page_size: Optional[int] = None, retire_orphans: bool = True) -> SyncRunReport:
        report = SyncRunReport()
        size = page_size or self._page_size
        credentials = self._catalog_client.build_credentials()

        snapshot = await self._synced_store.load_snapshot()
        logger.info("sync run started page_size=%d synced_records=%d", size, len(snapshot))

        seen: Set[str] = set()
        async for page in self._fetcher.pages(credentials, size, report):
            for part in page.parts:
                report.parts_seen += 1
                seen.add(part.id)
                outcome = await self.sync_part(credentials, part, snapshot)
                report.record(part.id, outcome)

        if not retire_orphans:
            logger.info("orphan retirement disabled for this run")
        elif report.pages_failed:
            report.orphan_retirement_skipped = True
            logger.warning(
                "orphan retirement skipped: %d catalog page(s) failed, pass incomplete",
                report.pages_failed,
            )
        else:
            await self.retire_orphans(snapshot, seen, report)

        logger.info("sync run finished report=%s", report.model_dump())
        return report

    async def sync_part(
        self,
        credentials: CatalogCredentials,
        part: RemotePart,
        snapshot: Dict[str, SyncedPartRecord],
    ) -> PartOutcome:
        """Create or update one part; never raises."""
        existing = snapshot.get(part.id)
        try:
            if existing is None:
                return await self._create(credentials, part, snapshot)
            return await self._update(credentials, part, existing, snapshot)
        except MediaFetchError as e:
            logger.warning("part_id=%s skipped, media unavailable: %s", part.id, e)
            return PartOutcome.SKIPPED
        except Exception as e:
            logger.error("part_id=%s sync failed: %s", part.id, e, exc_info=True)
            return PartOutcome.FAILED

    async def _resolve_media(self, part: RemotePart) -> ResolvedMedia:
        refs = part.photo_refs
        if not refs:
            return ResolvedMedia()
        return await self._media.resolve(refs)

    async def _release(self, part_id: str, media: Optional[ResolvedMedia]) -> None:
        if media is None or not media.cleanup_handles:
            return
        try:
            await self._media_store.release(media.cleanup_handles)
        except Exception as e:
            logger.warning("part_id=%s media cleanup failed: %s", part_id, e)

    async def _create(
        self,
        credentials: CatalogCredentials,
        part: RemotePart,
        snapshot: Dict[str, SyncedPartRecord],
    ) -> PartOutcome:
        enrichment = await self._enrichment.resolve(credentials, part)
        if isinstance(enrichment, SkipSignal):
            logger.info("part_id=%s skipped: %s", part.id, enrichment.reason)
            return PartOutcome.SKIPPED

        media = await self._resolve_media(part)
        location_id = await self._gateway.get_default_location_id() if part.in_stock else None
        payload = build_create_payload(part, enrichment, media, location_id)

        created = await self._gateway.create_product(payload)

        record = SyncedPartRecord(
            rrr_part_id=part.id,
            shopify_product_id=created["product_id"],
            shopify_variant_id=created.get("variant_id"),
            shopify_inventory_item_id=created.get("inventory_item_id"),
            metafields=payload.metafield_values,
            title=payload.title,
            price=payload.variant.price,
            barcode=payload.variant.barcode,
            description=payload.description_html,
            media=payload.media_input(),
            media_ids=created.get("media_ids") or [],
            photo_refs=payload.photo_refs,
        )
        # The product exists now; never create it twice in this pass
        snapshot[part.id] = record

        try:
            await self._raw_store.upsert_part(part)
            await self._synced_store.insert_record(record)
        except LocalStoreError as e:
            logger.critical(
                "part_id=%s created as %s but local write failed (consistency risk): %s",
                part.id, record.shopify_product_id, e,
            )
            return PartOutcome.FAILED
        finally:
            await self._release(part.id, media)

        logger.info("part_id=%s created product_id=%s", part.id, record.shopify_product_id)
        return PartOutcome.CREATED

    async def _update(
        self,
        credentials: CatalogCredentials,
        part: RemotePart,
        existing: SyncedPartRecord,
        snapshot: Dict[str, SyncedPartRecord],
    ) -> PartOutcome:
        enrichment = await self._enrichment.resolve(credentials, part)
        if isinstance(enrichment, SkipSignal):
            logger.info("part_id=%s skipped: %s", part.id, enrichment.reason)
            return PartOutcome.SKIPPED

        payload = build_update_payload(part, enrichment, existing)
        if isinstance(payload, NoChange):
            logger.debug("part_id=%s no change", part.id)
            return PartOutcome.NO_CHANGE

        media = None
        if payload.media_changed:
            media = await self._resolve_media(part)
            payload.media = media
            if existing.media_ids:
                await self._gateway.delete_media(existing.shopify_product_id, existing.media_ids)
                # Stored media_ids must match the product before the update runs
                existing = existing.model_copy(update={"media_ids": []})
                snapshot[part.id] = existing
                try:
                    await self._synced_store.merge_record(part.id, {"media_ids": []})
                except LocalStoreError as e:
                    logger.critical(
                        "part_id=%s deleted media on product_id=%s but local write failed (consistency risk): %s",
                        part.id, existing.shopify_product_id, e,
                    )
                    return PartOutcome.FAILED

        result = await self._gateway.update_product(
            existing.shopify_product_id, existing.shopify_variant_id, payload
        )

        changes = record_changes(payload)
        if payload.media_changed:
            changes["media_ids"] = result.get("media_ids") or []
        snapshot[part.id] = existing.model_copy(update=changes)

        try:
            await self._synced_store.merge_record(part.id, changes)
        except LocalStoreError as e:
            logger.critical(
                "part_id=%s updated product_id=%s but local write failed (consistency risk): %s",
                part.id, existing.shopify_product_id, e,
            )
            return PartOutcome.FAILED
        finally:
            await self._release(part.id, media)

        logger.info("part_id=%s updated fields=%s", part.id, sorted(payload.changed_fields))
        return PartOutcome.UPDATED

    async def retire_orphans(
        self,
        snapshot: Dict[str, SyncedPartRecord],
        seen: Set[str],
        report: SyncRunReport,
    ) -> None:
        """Set every unseen synced product to DRAFT; local rows stay."""
        orphans = [r for part_id, r in snapshot.items() if part_id not in seen]
        logger.info("orphan retirement candidates=%d", len(orphans))
        for record in orphans:
            try:
                await self._gateway.set_product_status(record.shopify_product_id, STATUS_DRAFT)
            except Exception as e:
                report.retire_failed += 1
                logger.error(
                    "part_id=%s retire failed product_id=%s: %s",
                    record.rrr_part_id, record.shopify_product_id, e,
                )
                continue
            report.record(record.rrr_part_id, PartOutcome.RETIRED)
