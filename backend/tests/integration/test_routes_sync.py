"""
Integration tests for the manual trigger routes.

Tests POST /sync/trigger and POST /media/purge: both enqueue a Celery
task and return its id, or 503 when the broker is unreachable.
Version: 1.0.0
"""
import os
import pytest
from unittest.mock import MagicMock, patch

os.environ.setdefault("AUTO_START_CELERY", "false")

from fastapi.testclient import TestClient


@pytest.fixture
def client():
    with patch.dict(os.environ, {"AUTO_START_CELERY": "false"}):
        from partsync.main import app
        with TestClient(app, raise_server_exceptions=False) as c:
            yield c


@pytest.mark.integration
class TestSyncTrigger:

    def test_trigger_queues_reconciliation(self, client):
        with patch("partsync.routes.sync.run_reconciliation") as task:
            task.delay.return_value = MagicMock(id="task-123")
            response = client.post("/sync/trigger")

        assert response.status_code == 200
        assert response.json() == {"status": "queued", "task_id": "task-123"}
        task.delay.assert_called_once_with()

    def test_trigger_broker_down_returns_503(self, client):
        with patch("partsync.routes.sync.run_reconciliation") as task:
            task.delay.side_effect = ConnectionError("redis down")
            response = client.post("/sync/trigger")

        assert response.status_code == 503


@pytest.mark.integration
class TestMediaPurge:

    def test_purge_queued(self, client):
        with patch("partsync.routes.sync.purge_media_bucket") as task:
            task.delay.return_value = MagicMock(id="task-456")
            response = client.post("/media/purge")

        assert response.status_code == 200
        assert response.json()["task_id"] == "task-456"

    def test_purge_broker_down_returns_503(self, client):
        with patch("partsync.routes.sync.purge_media_bucket") as task:
            task.delay.side_effect = ConnectionError("redis down")
            assert client.post("/media/purge").status_code == 503
