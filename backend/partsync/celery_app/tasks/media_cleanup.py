"""
Media cleanup task — empties the rehosted-media bucket on a schedule.

Rehosted images are only needed until Shopify has copied them; anything
left behind (failed mutations, crashed runs) is swept here.
Version: 1.0.0
"""
import logging

from partsync.celery_app.celery_config import celery_app
from partsync.celery_app.tasks.base import BaseTask, run_async
from partsync.core.exceptions import ExternalAPIError

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    base=BaseTask,
    name="tasks.media_cleanup.purge_media_bucket",
    autoretry_for=(ExternalAPIError,),
    max_retries=2,
)
def purge_media_bucket(self):
    from partsync.container import get_media_store

    deleted = run_async(get_media_store().purge_all())
    logger.info(f"Media bucket purge deleted={deleted}")
    return {"status": "completed", "deleted": deleted}
