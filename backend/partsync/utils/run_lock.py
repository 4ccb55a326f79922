"""
Run lock — Redis SET NX EX guard so only one reconciliation runs at a time.

The TTL bounds how long a crashed worker can block later runs.
Version: 1.0.0
"""
import logging

import redis

from partsync.core.config import settings

logger = logging.getLogger(__name__)

RUN_LOCK_KEY = "partsync:reconcile_lock"


def _get_redis() -> redis.Redis:
    """Create a Redis client from the configured URL."""
    return redis.Redis.from_url(settings.redis_url, decode_responses=True)


def acquire_run_lock(task_id: str = "unknown") -> bool:
    """Returns True if this caller now holds the lock."""
    r = _get_redis()
    ttl = settings.sync_run_lock_ttl_seconds
    acquired = r.set(RUN_LOCK_KEY, task_id, nx=True, ex=ttl)

    if acquired:
        logger.info(f"Run lock ACQUIRED: task={task_id}, ttl={ttl}s")
    else:
        holder = r.get(RUN_LOCK_KEY)
        logger.info(f"Run lock HELD: holder={holder}, skipping")

    return bool(acquired)


def release_run_lock(task_id: str = "unknown") -> None:
    """Release the lock, but only if task_id still holds it."""
    r = _get_redis()
    holder = r.get(RUN_LOCK_KEY)
    if holder == task_id:
        r.delete(RUN_LOCK_KEY)
        logger.debug(f"Run lock released: task={task_id}")
    else:
        logger.warning(f"Run lock not released: task={task_id}, holder={holder}")
