"""Tests for the task service REST client (requests is mocked)."""

import asyncio
from unittest.mock import MagicMock

import pytest
import requests

from taskboard.integrations.gateway import AsyncTaskGateway
from taskboard.integrations.task_api import TaskApiClient, TaskApiError


def _response(payload, status_code=200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


@pytest.fixture
def http_session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(http_session):
    return TaskApiClient(base_url="http://tasks.test/", api_token="test-token", timeout=3, session=http_session)


class TestTaskApiClient:
    """Test TaskApiClient request shapes and error mapping."""

    def test_update_roadmap_item_sends_patch_and_parses_task(self, client, http_session, sample_task_payload):
        canonical = {**sample_task_payload, "overallProgress": 50}
        http_session.request.return_value = _response({"success": True, "data": {"task": canonical}})

        task = client.update_roadmap_item("t1", 0, True)

        http_session.request.assert_called_once()
        args, kwargs = http_session.request.call_args
        assert args == ("PATCH", "http://tasks.test/api/ai/tasks/t1/roadmap/0")
        assert kwargs["json"] == {"completed": True}
        assert kwargs["headers"]["Authorization"] == "Bearer test-token"
        assert kwargs["timeout"] == 3
        assert task.id == "t1"
        assert task.overall_progress == 50

    def test_non_success_raises(self, client, http_session):
        http_session.request.return_value = _response({"success": False, "message": "nope"}, 400)

        with pytest.raises(TaskApiError, match="nope"):
            client.update_roadmap_item("t1", 0, True)

    def test_transport_error_raises(self, client, http_session):
        http_session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(TaskApiError) as exc_info:
            client.delete_task("t1")
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_non_json_body_raises(self, client, http_session):
        resp = _response(None, 502)
        resp.json.side_effect = ValueError("no json")
        http_session.request.return_value = resp

        with pytest.raises(TaskApiError):
            client.fetch_tasks()

    def test_malformed_canonical_task_raises(self, client, http_session):
        http_session.request.return_value = _response(
            {"success": True, "data": {"task": {"_id": "t1", "roadmapItems": "broken"}}}
        )

        with pytest.raises(TaskApiError):
            client.update_roadmap_item("t1", 0, True)

    def test_missing_task_payload_raises(self, client, http_session):
        http_session.request.return_value = _response({"success": True, "data": {}})

        with pytest.raises(TaskApiError):
            client.fetch_task("t1")

    def test_delete_task(self, client, http_session):
        http_session.request.return_value = _response({"success": True})

        client.delete_task("t1")

        args, _ = http_session.request.call_args
        assert args == ("DELETE", "http://tasks.test/api/ai/tasks/t1")

    def test_fetch_tasks_skips_malformed_entries(self, client, http_session, sample_task_payload):
        http_session.request.return_value = _response(
            {"success": True, "data": {"tasks": [sample_task_payload, {"_id": "bad", "overallProgress": 400}]}}
        )

        tasks = client.fetch_tasks()

        assert [t.id for t in tasks] == ["t1"]

    def test_fetch_group_members(self, client, http_session):
        http_session.request.return_value = _response(
            {
                "success": True,
                "group": {"members": [{"_id": "member-1", "username": "alice"}, {"username": "no id"}]},
            }
        )

        members = client.fetch_group_members()

        assert [(m.id, m.username) for m in members] == [("member-1", "alice")]

    def test_fetch_group_members_without_group(self, client, http_session):
        http_session.request.return_value = _response({"success": True, "group": None})
        assert client.fetch_group_members() == []

    def test_token_from_environment(self, monkeypatch, http_session):
        monkeypatch.setenv("TASKBOARD_API_TOKEN", "env-token")
        monkeypatch.setenv("TASKBOARD_API_BASE_URL", "http://env.test")

        env_client = TaskApiClient(session=http_session)

        assert env_client.base_url == "http://env.test"
        assert env_client.headers["Authorization"] == "Bearer env-token"


class TestAsyncTaskGateway:
    """Test the awaitable adapter."""

    def test_runs_client_calls(self, sample_task):
        client = MagicMock(spec=TaskApiClient)
        client.update_roadmap_item.return_value = sample_task
        gateway = AsyncTaskGateway(client)

        result = asyncio.run(gateway.update_roadmap_item("t1", 1, True))

        assert result is sample_task
        client.update_roadmap_item.assert_called_once_with("t1", 1, True)

    def test_propagates_client_errors(self):
        client = MagicMock(spec=TaskApiClient)
        client.delete_task.side_effect = TaskApiError("boom")

        with pytest.raises(TaskApiError):
            asyncio.run(AsyncTaskGateway(client).delete_task("t1"))
