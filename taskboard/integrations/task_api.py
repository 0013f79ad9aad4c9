"""Task service REST integration for taskboard."""

import logging
import os
from typing import Any, Dict, List, Optional
import requests
from dotenv import load_dotenv
from pydantic import ValidationError

from taskboard.models.task import Task
from taskboard.models.group import GroupMember
from taskboard.models.constants import DEFAULT_HTTP_TIMEOUT_SEC

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "http://localhost:5000"


class TaskApiError(RuntimeError):
    """Transport failure, non-success response, or malformed payload."""


class TaskApiClient:
    """Client for the task service REST API.

    Every endpoint answers `{"success": bool, ...}`; anything other than a
    well-formed success raises TaskApiError.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the task service client.

        Args:
            base_url: API root. If None, reads TASKBOARD_API_BASE_URL.
            api_token: Bearer token. If None, reads TASKBOARD_API_TOKEN.
            timeout: Per-request timeout in seconds.
            session: Optional requests session (connection reuse, testing).
        """
        self.base_url = (base_url or os.getenv("TASKBOARD_API_BASE_URL", DEFAULT_API_BASE_URL)).rstrip("/")
        self.api_token = api_token or os.getenv("TASKBOARD_API_TOKEN")
        self.timeout = timeout if timeout is not None else DEFAULT_HTTP_TIMEOUT_SEC
        self.session = session or requests.Session()

        self.headers = {"Content-Type": "application/json"}
        if self.api_token:
            self.headers["Authorization"] = f"Bearer {self.api_token}"
        else:
            logger.warning("TASKBOARD_API_TOKEN not set. Requests will be unauthenticated.")

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, headers=self.headers, json=json, timeout=self.timeout)
            data = response.json()
        except requests.RequestException as e:
            raise TaskApiError(f"{method} {path} failed: {e}") from e
        except ValueError as e:
            raise TaskApiError(f"{method} {path} returned a non-JSON body") from e

        if not isinstance(data, dict) or not data.get("success"):
            message = data.get("message") if isinstance(data, dict) else None
            raise TaskApiError(f"{method} {path} was not successful: {message or response.status_code}")
        return data

    def fetch_tasks(self) -> List[Task]:
        """Fetch the full task collection.

        Entries that fail validation are skipped with a warning.

        Returns:
            List of Task objects in server order
        """
        data = self._request("GET", "/api/ai/tasks")
        payload = data.get("data")
        raw_tasks = payload.get("tasks") if isinstance(payload, dict) else None
        if not isinstance(raw_tasks, list):
            raise TaskApiError("Task list payload is missing 'data.tasks'")

        tasks: List[Task] = []
        for raw in raw_tasks:
            try:
                tasks.append(Task.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed task payload: {e.error_count()} errors")
        return tasks

    def fetch_task(self, task_id: str) -> Task:
        """Fetch one task (e.g. to refresh group assignments)."""
        return self._parse_task(self._request("GET", f"/api/ai/tasks/{task_id}"))

    def update_roadmap_item(self, task_id: str, item_position: int, completed: bool) -> Task:
        """Set a roadmap item's completed flag.

        Returns:
            The canonical task as recomputed by the server
        """
        data = self._request(
            "PATCH",
            f"/api/ai/tasks/{task_id}/roadmap/{item_position}",
            json={"completed": completed},
        )
        return self._parse_task(data)

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/api/ai/tasks/{task_id}")

    def fetch_group_members(self) -> List[GroupMember]:
        """Fetch the members of the actor's current group.

        Returns:
            Members in server order (empty when the actor has no group)
        """
        data = self._request("GET", "/api/groups/current")
        group = data.get("group")
        if not isinstance(group, dict) or not isinstance(group.get("members"), list):
            return []

        members: List[GroupMember] = []
        for raw in group["members"]:
            try:
                members.append(GroupMember.model_validate(raw))
            except ValidationError:
                logger.warning(f"Skipping malformed group member: {raw!r}")
        return members

    def _parse_task(self, data: Dict[str, Any]) -> Task:
        payload = data.get("data")
        raw = payload.get("task") if isinstance(payload, dict) else None
        if not isinstance(raw, dict):
            raise TaskApiError("Task payload is missing 'data.task'")
        try:
            return Task.model_validate(raw)
        except ValidationError as e:
            raise TaskApiError(f"Malformed task payload: {e.error_count()} errors") from e
