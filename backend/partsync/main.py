import logging
import os
import platform
import subprocess
import sys
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI

from partsync.core.config import settings
from partsync.routes import api_router

logger = logging.getLogger(__name__)

# Track Celery subprocesses for cleanup
_celery_processes: List[subprocess.Popen] = []


def _backend_dir() -> str:
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _spawn(cmd: List[str], label: str) -> Optional[subprocess.Popen]:
    try:
        kwargs = {"cwd": _backend_dir()}
        if platform.system() == "Windows":
            kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP

        process = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            **kwargs
        )
        logger.info(f"{label} started (PID: {process.pid})")
        return process
    except Exception as e:
        logger.error(f"Failed to start {label}: {e}")
        return None


def _start_celery_worker() -> Optional[subprocess.Popen]:
    """Start Celery worker as a subprocess."""
    pool_type = "solo" if platform.system() == "Windows" else "prefork"
    cmd = [
        sys.executable, "-m", "celery",
        "-A", "partsync.celery_app",
        "worker",
        f"--pool={pool_type}",
        "-Q", "reconcile,media,default",
        "-l", "info",
        "--concurrency=1",
    ]
    return _spawn(cmd, "Celery worker")


def _start_celery_beat() -> Optional[subprocess.Popen]:
    """Start Celery Beat scheduler as a subprocess."""
    cmd = [
        sys.executable, "-m", "celery",
        "-A", "partsync.celery_app",
        "beat",
        "-l", "info",
    ]
    return _spawn(cmd, "Celery Beat")


def _stop_celery_processes():
    """Stop all Celery subprocesses."""
    import signal

    for process in _celery_processes:
        if process and process.poll() is None:
            try:
                logger.info(f"Stopping Celery process (PID: {process.pid})...")
                if platform.system() == "Windows":
                    process.terminate()
                else:
                    process.send_signal(signal.SIGTERM)
                process.wait(timeout=10)
            except subprocess.TimeoutExpired:
                logger.warning(f"Force killing Celery process {process.pid}")
                process.kill()

    _celery_processes.clear()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    On startup, optionally start a Celery worker and beat (AUTO_START_CELERY,
    default true). On shutdown, stop them.
    """
    logger.info("=== Parts Sync Starting ===")

    auto_start_celery = os.getenv("AUTO_START_CELERY", "true").lower() == "true"
    if auto_start_celery:
        for starter in (_start_celery_worker, _start_celery_beat):
            process = starter()
            if process:
                _celery_processes.append(process)
        logger.info(f"Started {len(_celery_processes)} Celery processes")
    else:
        logger.info("Celery auto-start disabled (AUTO_START_CELERY=false)")

    logger.info(
        "Schedules: enabled=%s reconcile=%r media_purge=%r",
        settings.cron_job_enabled,
        settings.cron_expression,
        settings.cron_expression_for_media_deletion,
    )
    logger.info("=== Parts Sync Ready ===")

    yield

    logger.info("=== Parts Sync Shutting Down ===")
    if _celery_processes:
        _stop_celery_processes()
    logger.info("Shutdown complete")


app = FastAPI(title="Shopify Parts Sync", lifespan=lifespan)
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s:%(name)s:%(message)s")

app.include_router(api_router)
