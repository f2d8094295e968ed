# =============================================================================
# tests/test_health_tasks.py - Health and Task Status Endpoint Tests
# =============================================================================

from unittest.mock import MagicMock, patch

from lib.supabase_client import SupabaseClient


class TestHealth:

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["environment"] == "development"

    def test_live(self, client):
        assert client.get("/api/v1/health/live").json()["status"] == "alive"

    def test_ready(self, client):
        with patch.object(SupabaseClient, "get_client", return_value=MagicMock()):
            response = client.get("/api/v1/health/ready")

        assert response.json()["status"] == "ready"

    def test_degraded_when_database_is_down(self, client):
        mock = MagicMock()
        mock.table.side_effect = Exception("connection refused")

        with patch.object(SupabaseClient, "get_client", return_value=mock):
            response = client.get("/api/v1/health/ready")

        body = response.json()
        assert body["status"] == "degraded"
        assert body["checks"]["database"].startswith("unhealthy")
        assert body["checks"]["storage"] == "healthy"

    def test_unknown_route_uses_error_body(self, client):
        response = client.get("/api/v1/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}


class TestTaskStatus:

    def _result(self, status, result=None):
        async_result = MagicMock()
        async_result.status = status
        async_result.result = result
        return async_result

    def test_pending(self, client):
        with patch("workers.celery_app.celery_app.AsyncResult", return_value=self._result("PENDING")):
            response = client.get("/api/v1/tasks/task-123")

        assert response.status_code == 200
        assert response.json()["status"] == "PENDING"

    def test_success_exposes_send_outcome(self, client):
        outcome = {"success": True, "email_id": "em_1", "kind": "completion", "project_id": "p1"}

        with patch("workers.celery_app.celery_app.AsyncResult", return_value=self._result("SUCCESS", outcome)):
            response = client.get("/api/v1/tasks/task-123")

        body = response.json()
        assert body["status"] == "SUCCESS"
        assert body["result"] == outcome

    def test_failure(self, client):
        with patch(
            "workers.celery_app.celery_app.AsyncResult",
            return_value=self._result("FAILURE", TimeoutError("hard time limit")),
        ):
            response = client.get("/api/v1/tasks/task-123")

        assert response.json()["error"] == "hard time limit"
