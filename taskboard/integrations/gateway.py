"""Awaitable adapter over the blocking task service client.

Each call runs in a worker thread so the event loop stays free for other
roadmap toggles while a request is outstanding.
"""

import asyncio
from typing import List, Optional

from taskboard.models.task import Task
from taskboard.models.group import GroupMember
from taskboard.integrations.task_api import TaskApiClient


class AsyncTaskGateway:
    """Coroutine facade used by the reconciler and the session."""

    def __init__(self, client: Optional[TaskApiClient] = None):
        self.client = client or TaskApiClient()

    async def fetch_tasks(self) -> List[Task]:
        return await asyncio.to_thread(self.client.fetch_tasks)

    async def fetch_task(self, task_id: str) -> Task:
        return await asyncio.to_thread(self.client.fetch_task, task_id)

    async def update_roadmap_item(self, task_id: str, item_position: int, completed: bool) -> Task:
        return await asyncio.to_thread(self.client.update_roadmap_item, task_id, item_position, completed)

    async def delete_task(self, task_id: str) -> None:
        await asyncio.to_thread(self.client.delete_task, task_id)

    async def fetch_group_members(self) -> List[GroupMember]:
        return await asyncio.to_thread(self.client.fetch_group_members)
