"""
Base store — Supabase table access shared by the part stores.

Queries are built on the postgrest builder and executed through one
path, so a postgrest APIError surfaces as LocalStoreError carrying the
table name and the operation. The sync engine relies on that type to
tell a failed local write apart from a failed Shopify mutation.
Version: 1.0.0
"""

import logging
from typing import Any, Dict, List, Optional

from postgrest.exceptions import APIError

from partsync.core.config import settings
from partsync.core.exceptions import LocalStoreError
from partsync.clients.supabase_client import SupabaseClient

logger = logging.getLogger("base_store")

Row = Dict[str, Any]


class BaseStore:
    def __init__(self, supabase_client: Optional[SupabaseClient] = None) -> None:
        self._supabase_client = supabase_client

    @property
    def _client(self):
        if self._supabase_client is None:
            self._supabase_client = SupabaseClient(settings)
        return self._supabase_client.client

    @staticmethod
    def _execute(table: str, operation: str, query) -> Any:
        try:
            return query.execute()
        except APIError as e:
            logger.warning("table=%s %s rejected: %s", table, operation, e)
            raise LocalStoreError(table, f"{operation} failed: {e}") from e

    @staticmethod
    def _where(query, filters: Optional[Row]):
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        return query

    async def _insert(self, table: str, rows: List[Row]) -> None:
        if rows:
            self._execute(table, "insert", self._client.table(table).insert(rows))

    async def _upsert(self, table: str, rows: List[Row], on_conflict: str) -> None:
        """Insert rows, overwriting any row that collides on `on_conflict`."""
        if rows:
            self._execute(
                table, "upsert", self._client.table(table).upsert(rows, on_conflict=on_conflict)
            )

    async def _select(
        self, table: str, columns: str = "*", filters: Optional[Row] = None
    ) -> List[Row]:
        query = self._where(self._client.table(table).select(columns), filters)
        response = self._execute(table, "select", query)
        return response.data or []

    async def _update(self, table: str, filters: Row, payload: Row) -> None:
        """Set `payload` columns on every row matching the equality filters."""
        query = self._where(self._client.table(table).update(payload), filters)
        self._execute(table, "update", query)
