"""
Celery application configuration.
Configures the Redis broker, task queues and the two periodic jobs.

=============================================================================
RUNNING WORKERS
=============================================================================

    Worker (reconciliation runs are serialised by a Redis lock, so one
    process is enough):
        celery -A partsync.celery_app worker -Q reconcile,media,default --concurrency=1 -l info

    Beat (scheduler):
        celery -A partsync.celery_app beat -l info

=============================================================================
ENVIRONMENT VARIABLES
=============================================================================
    CRON_JOB_ENABLED: anything but "false" enables both schedules
    CRON_EXPRESSION: reconciliation schedule (default: "0 0 * * *")
    CRON_EXPRESSION_FOR_MEDIA_DELETION: bucket purge schedule (default: "0 3 * * *")
    REDIS_URL: broker, result backend and run lock
"""
import logging
import platform

from celery import Celery
from celery.schedules import crontab
from kombu import Queue

from partsync.core.config import settings
from partsync.utils.schedule_helpers import parse_cron_expression

logger = logging.getLogger(__name__)

IS_WINDOWS = platform.system() == "Windows"

CRON_JOB_ENABLED = settings.cron_job_enabled
CRON_EXPRESSION = settings.cron_expression
CRON_EXPRESSION_FOR_MEDIA_DELETION = settings.cron_expression_for_media_deletion


def _build_beat_schedule() -> dict:
    """Build Celery Beat schedule; empty when scheduling is disabled."""
    if not CRON_JOB_ENABLED:
        logger.info("Cron jobs disabled (CRON_JOB_ENABLED=false)")
        return {}

    return {
        "reconcile-catalog": {
            "task": "tasks.reconcile.run_reconciliation",
            "schedule": crontab(**parse_cron_expression(CRON_EXPRESSION)),
            "options": {"queue": "reconcile"},
        },
        "purge-media-bucket": {
            "task": "tasks.media_cleanup.purge_media_bucket",
            "schedule": crontab(**parse_cron_expression(CRON_EXPRESSION_FOR_MEDIA_DELETION)),
            "options": {"queue": "media"},
        },
    }


celery_app = Celery(
    "partsync",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "partsync.celery_app.tasks.reconcile",
        "partsync.celery_app.tasks.media_cleanup",
    ]
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,

    task_queues=(
        Queue("reconcile"),
        Queue("media"),
        Queue("default"),
    ),
    task_routes={
        "tasks.reconcile.*": {"queue": "reconcile"},
        "tasks.media_cleanup.*": {"queue": "media"},
    },

    beat_schedule=_build_beat_schedule(),

    # Result expiration
    result_expires=3600,  # 1 hour

    worker_pool="solo" if IS_WINDOWS else "prefork",

    # A full run can take hours; keep the message invisible for longer than that
    broker_transport_options={"visibility_timeout": settings.sync_run_lock_ttl_seconds},

    worker_log_format="[%(asctime)s: %(levelname)s/%(processName)s] %(message)s",
    worker_task_log_format="[%(asctime)s: %(levelname)s/%(processName)s] [%(task_name)s] %(message)s",
)
