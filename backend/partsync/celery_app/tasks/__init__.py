"""
Celery tasks package.
Exports all tasks for convenient imports.
"""
from partsync.celery_app.tasks.reconcile import run_reconciliation
from partsync.celery_app.tasks.media_cleanup import purge_media_bucket

__all__ = [
    "run_reconciliation",
    "purge_media_bucket",
]
