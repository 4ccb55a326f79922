"""
Run one reconciliation pass in the foreground.

Bypasses Celery and the run lock; use it for first imports and for
debugging a single run against the real catalog and store.

Usage (from backend/):
    python -m scripts.run_sync

    # Smaller pages
    python -m scripts.run_sync --page-size 25

    # Do not draft products missing from the feed
    python -m scripts.run_sync --no-retire
"""

import argparse
import asyncio
import json
import logging

from partsync.clients.browser_fetcher import BrowserFetcher
from partsync.container import build_sync_engine
from partsync.core.config import settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def run(page_size: int, retire_orphans: bool) -> dict:
    fetcher = BrowserFetcher(settings)
    try:
        report = await build_sync_engine(fetcher).run(
            page_size=page_size, retire_orphans=retire_orphans
        )
    finally:
        await fetcher.aclose()
    return report.model_dump()


def main():
    parser = argparse.ArgumentParser(description="Run one catalog-to-Shopify reconciliation pass")
    parser.add_argument(
        "--page-size",
        type=int,
        default=settings.parts_page_size,
        help=f"Parts per catalog page (default: {settings.parts_page_size})",
    )
    parser.add_argument(
        "--no-retire",
        action="store_true",
        help="Skip drafting products whose part is missing from the feed",
    )
    args = parser.parse_args()

    logger.info(f"Starting reconciliation page_size={args.page_size} retire={not args.no_retire}")
    report = asyncio.run(run(args.page_size, not args.no_retire))
    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
