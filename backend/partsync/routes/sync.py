"""
Sync routes — manual triggers for reconciliation and media purge.

Both endpoints only enqueue Celery tasks; the work runs on a worker.
Version: 1.0.0
"""
import logging

from fastapi import APIRouter, HTTPException

from partsync.celery_app.tasks.media_cleanup import purge_media_bucket
from partsync.celery_app.tasks.reconcile import run_reconciliation

logger = logging.getLogger(__name__)
router = APIRouter(tags=["sync"])


@router.post("/sync/trigger")
async def trigger_sync():
    """Queue one full reconciliation run."""
    try:
        task = run_reconciliation.delay()
    except Exception as e:
        logger.error(f"Failed to queue reconciliation: {e}")
        raise HTTPException(status_code=503, detail="Task queue unavailable")
    logger.info(f"Reconciliation queued task_id={task.id}")
    return {"status": "queued", "task_id": task.id}


@router.post("/media/purge")
async def trigger_media_purge():
    """Queue a full purge of the rehosted-media bucket."""
    try:
        task = purge_media_bucket.delay()
    except Exception as e:
        logger.error(f"Failed to queue media purge: {e}")
        raise HTTPException(status_code=503, detail="Task queue unavailable")
    logger.info(f"Media purge queued task_id={task.id}")
    return {"status": "queued", "task_id": task.id}
