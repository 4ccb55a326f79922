"""
Reconciliation task — one full catalog-to-Shopify sync run.

Tasks:
- run_reconciliation: runs the sync engine under the Redis run lock

This task is the supervising layer: the engine never retries, but a run
that could not even start paging (catalog unreachable or credentials
rejected) is retried here with exponential backoff.
Version: 1.0.0
"""
import logging
from typing import Any, Dict, Optional

from partsync.celery_app.celery_config import celery_app
from partsync.celery_app.tasks.base import BaseTask, run_async
from partsync.core.config import settings
from partsync.core.exceptions import AuthOrNetworkError
from partsync.utils.run_lock import acquire_run_lock, release_run_lock

logger = logging.getLogger(__name__)


async def _run_sync(page_size: Optional[int], retire_orphans: bool) -> Dict[str, Any]:
    # Lazy imports: keep worker startup light and avoid circular imports
    from partsync.clients.browser_fetcher import BrowserFetcher
    from partsync.container import build_sync_engine

    fetcher = BrowserFetcher(settings)
    try:
        engine = build_sync_engine(fetcher)
        report = await engine.run(page_size=page_size, retire_orphans=retire_orphans)
    finally:
        await fetcher.aclose()
    return report.model_dump()


@celery_app.task(
    bind=True,
    base=BaseTask,
    name="tasks.reconcile.run_reconciliation",
    autoretry_for=(AuthOrNetworkError,),
    retry_backoff=True,
    max_retries=3,
)
def run_reconciliation(self, page_size: Optional[int] = None, retire_orphans: bool = True):
    """
    Run one reconciliation pass.

    Returns the run report, or {"status": "skipped"} when another run
    already holds the lock.
    """
    task_id = self.request.id or "manual"
    if not acquire_run_lock(task_id):
        logger.info("Reconciliation already running, skipping this trigger")
        return {"status": "skipped"}

    try:
        logger.info(f"Reconciliation started task_id={task_id}")
        report = run_async(_run_sync(page_size, retire_orphans))
        logger.info(f"Reconciliation finished task_id={task_id} report={report}")
        return {"status": "completed", "report": report}
    finally:
        release_run_lock(task_id)
