"""
Synced part store — local mirror of parts already created in Shopify.

One row per catalog part id (column rrr_part_id). Rows are inserted on
first successful create and merged on update; normal operation never
deletes them, retirement only changes the Shopify product status.
Version: 1.0.0
"""

import logging
from typing import Any, Dict, Optional

from partsync.core.config import settings
from partsync.db.base_store import BaseStore
from partsync.schemas.parts import SyncedPartRecord

logger = logging.getLogger("synced_part_store")

PART_ID_COLUMN = "rrr_part_id"


class SyncedPartStore(BaseStore):

    def __init__(self, supabase_client=None, table: str | None = None) -> None:
        super().__init__(supabase_client)
        self._table = table or settings.supabase_synced_parts_table

    async def load_snapshot(self) -> Dict[str, SyncedPartRecord]:
        """Every synced record, keyed by catalog part id."""
        rows = await self._select(self._table)
        snapshot = {}
        for row in rows:
            record = SyncedPartRecord.model_validate(row)
            snapshot[record.rrr_part_id] = record
        logger.info("synced snapshot loaded table=%s rows=%d", self._table, len(snapshot))
        return snapshot

    async def get_by_part_id(self, part_id: str) -> Optional[SyncedPartRecord]:
        rows = await self._select(self._table, filters={PART_ID_COLUMN: str(part_id)})
        if not rows:
            return None
        return SyncedPartRecord.model_validate(rows[0])

    async def insert_record(self, record: SyncedPartRecord) -> None:
        await self._insert(self._table, [record.model_dump(mode="json")])
        logger.info(
            "synced record inserted part_id=%s product_id=%s",
            record.rrr_part_id,
            record.shopify_product_id,
        )

    async def merge_record(self, part_id: str, changes: Dict[str, Any]) -> None:
        """$set-style merge: only the given columns are overwritten."""
        if not changes:
            return
        await self._update(self._table, {PART_ID_COLUMN: str(part_id)}, changes)
        logger.info("synced record merged part_id=%s fields=%s", part_id, sorted(changes))
