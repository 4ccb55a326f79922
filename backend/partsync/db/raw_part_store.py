"""
Raw part store — verbatim catalog snapshots.

Version: 1.0.0
"""

import logging

from partsync.core.config import settings
from partsync.db.base_store import BaseStore
from partsync.schemas.parts import RemotePart

logger = logging.getLogger("raw_part_store")


class RawPartStore(BaseStore):
    """Persist the catalog payload of each created part, keyed by id."""

    def __init__(self, supabase_client=None, table: str | None = None) -> None:
        super().__init__(supabase_client)
        self._table = table or settings.supabase_raw_parts_table

    async def upsert_part(self, part: RemotePart) -> None:
        row = part.model_dump(mode="json")
        await self._upsert(self._table, [row], on_conflict="id")
        logger.info("raw part stored part_id=%s", part.id)
