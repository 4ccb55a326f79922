"""
Catalog fetcher — pages through the remote parts feed.

Pages are numbered from 1. The page bound is recomputed from the
reported total_count after every successful page, so a feed that grows
or shrinks mid-run is followed. Failure on the first page aborts the run
(AuthOrNetworkError propagates); failures on later pages, unreadable
bodies included, are logged, counted on the run report and skipped.
Version: 1.0.0
"""
import logging
import math
from typing import AsyncIterator, Optional

from pydantic import ValidationError

from partsync.clients.catalog_client import CatalogClient
from partsync.core.constants.catalog import FIRST_PAGE
from partsync.core.exceptions import AuthOrNetworkError
from partsync.schemas.parts import CatalogCredentials, CatalogPage, RemotePart
from partsync.schemas.sync import SyncRunReport

logger = logging.getLogger("catalog_fetcher")


class CatalogFetcher:
    def __init__(self, client: CatalogClient) -> None:
        self._client = client

    @staticmethod
    def _parse_page(page: int, body: dict) -> CatalogPage:
        """Raises ValueError when the page envelope itself is unusable."""
        if not isinstance(body, dict):
            raise ValueError(f"page body is {type(body).__name__}, not an object")
        parts = []
        for raw in body.get("data") or []:
            try:
                parts.append(RemotePart.model_validate(raw))
            except ValidationError as e:
                part_id = raw.get("id") if isinstance(raw, dict) else raw
                logger.warning("catalog page=%d dropped malformed part id=%s: %s", page, part_id, e)
        pagination = body.get("pagination") or {}
        if not isinstance(pagination, dict):
            raise ValueError(f"pagination is {type(pagination).__name__}, not an object")
        total = pagination.get("total_count")
        return CatalogPage(page=page, parts=parts, total_count=int(total) if total is not None else 0)

    async def pages(
        self,
        credentials: CatalogCredentials,
        page_size: int,
        report: Optional[SyncRunReport] = None,
    ) -> AsyncIterator[CatalogPage]:
        page = FIRST_PAGE
        last_page = FIRST_PAGE

        while page <= last_page:
            try:
                body = await self._client.fetch_parts_page(credentials, page, page_size)
                try:
                    result = self._parse_page(page, body)
                except (TypeError, ValueError) as e:
                    raise AuthOrNetworkError(f"page {page} has an unreadable body: {e}") from e
            except AuthOrNetworkError as e:
                if page == FIRST_PAGE:
                    raise
                logger.error("catalog page=%d failed, continuing: %s", page, e)
                if report is not None:
                    report.pages_failed += 1
                page += 1
                continue

            last_page = math.ceil(result.total_count / page_size) if page_size else FIRST_PAGE
            if report is not None:
                report.pages_fetched += 1
            logger.info(
                "catalog page=%d/%d parts=%d total_count=%d",
                page, last_page, len(result.parts), result.total_count,
            )
            yield result
            page += 1
