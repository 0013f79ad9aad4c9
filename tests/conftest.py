"""Pytest fixtures and configuration for taskboard tests."""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import jwt
import pytest

from taskboard.auth.jwt import JWT_ALGORITHM, JWT_SECRET_KEY
from taskboard.engine.progress import with_derived_progress
from taskboard.engine.store import SnapshotStore, SpeculativeOverlay
from taskboard.engine.reconciler import Reconciler
from taskboard.integrations.task_api import TaskApiError
from taskboard.models.group import GroupMember
from taskboard.models.task import Task


class FakeGateway:
    """In-memory task service with controllable suspension and failures.

    `gates` maps (task_id, position) to an asyncio.Event that an update for
    that key waits on before answering; create gates inside the running loop.
    """

    def __init__(self, tasks: List[Task], members: Optional[List[GroupMember]] = None):
        self.server_tasks: Dict[str, Task] = {task.id: task for task in tasks}
        self.members = list(members or [])
        self.update_calls: List[Tuple[str, int, bool]] = []
        self.delete_calls: List[str] = []
        self.gates: Dict[Tuple[str, int], asyncio.Event] = {}
        self.fail_updates = False
        self.fail_deletes = False
        self.fail_fetch = False
        self.fail_members = False
        self.canonical_override: Optional[Task] = None

    async def fetch_tasks(self) -> List[Task]:
        if self.fail_fetch:
            raise TaskApiError("GET /api/ai/tasks failed: connection refused")
        return list(self.server_tasks.values())

    async def fetch_task(self, task_id: str) -> Task:
        if self.fail_fetch or task_id not in self.server_tasks:
            raise TaskApiError(f"GET /api/ai/tasks/{task_id} was not successful: 404")
        return self.server_tasks[task_id]

    async def update_roadmap_item(self, task_id: str, item_position: int, completed: bool) -> Task:
        self.update_calls.append((task_id, item_position, completed))
        gate = self.gates.get((task_id, item_position))
        if gate is not None:
            await gate.wait()
        if self.fail_updates:
            raise TaskApiError(f"PATCH /api/ai/tasks/{task_id}/roadmap/{item_position} was not successful: 500")
        if self.canonical_override is not None:
            return self.canonical_override

        task = self.server_tasks[task_id]
        items = list(task.roadmap_items)
        items[item_position] = items[item_position].model_copy(update={"completed": completed})
        canonical = with_derived_progress(task.model_copy(update={"roadmap_items": items}))
        self.server_tasks[task_id] = canonical
        return canonical

    async def delete_task(self, task_id: str) -> None:
        self.delete_calls.append(task_id)
        if self.fail_deletes:
            raise TaskApiError(f"DELETE /api/ai/tasks/{task_id} was not successful: 500")
        self.server_tasks.pop(task_id, None)

    async def fetch_group_members(self) -> List[GroupMember]:
        if self.fail_members:
            raise TaskApiError("GET /api/groups/current failed: timeout")
        return list(self.members)


async def wait_until(predicate, attempts: int = 100) -> None:
    """Yield to the event loop until `predicate()` holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


@pytest.fixture
def test_actor_id():
    """Actor ID used for assignment checks."""
    return "member-1"


@pytest.fixture
def make_token():
    """Mint bearer tokens the way the task service signs them.

    Extra keyword claims override the defaults; pass `sub=None` to omit it.
    """
    def _make(sub: Optional[str] = "member-1", expires_in: timedelta = timedelta(hours=1), **claims) -> str:
        now = datetime.now(timezone.utc)
        payload = {"iat": now, "exp": now + expires_in}
        if sub is not None:
            payload["sub"] = sub
        payload.update(claims)
        return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)
    return _make


@pytest.fixture
def sample_task_payload():
    """Wire-format task (as returned by the task service) with two open roadmap items."""
    return {
        "_id": "t1",
        "title": "Learn Rust",
        "description": "Work through the book",
        "priority": "high",
        "duration": "2 weeks",
        "aiGenerated": True,
        "isGroupTask": False,
        "createdBy": {"_id": "member-2", "username": "bob"},
        "roadmapItems": [
            {"text": "a", "completed": False},
            {"text": "b", "completed": False},
        ],
        "overallProgress": 0,
        "completed": False,
        "milestones": [{"title": "Chapter 5", "dueDate": "2026-11-01T00:00:00Z"}],
        "resources": {
            "free": [{"title": "The Book", "url": "https://doc.rust-lang.org/book/", "platform": "Docs"}],
            "paid": [],
        },
    }


@pytest.fixture
def sample_task(sample_task_payload):
    """The sample payload as a Task."""
    return Task.model_validate(sample_task_payload)


@pytest.fixture
def make_task():
    """Factory for tasks with a given roadmap completion pattern."""
    def _make(task_id: Optional[str] = None, completed_flags=(False, False), **overrides) -> Task:
        items = [{"text": f"step {i}", "completed": flag} for i, flag in enumerate(completed_flags)]
        payload = {
            "_id": task_id or str(uuid.uuid4()),
            "title": f"Task {task_id}",
            "priority": "medium",
            "roadmapItems": items,
        }
        payload.update(overrides)
        return with_derived_progress(Task.model_validate(payload))
    return _make


@pytest.fixture
def group_members():
    """Members of the actor's group."""
    return [
        GroupMember.model_validate({"_id": "member-1", "username": "alice"}),
        GroupMember.model_validate({"_id": "member-2", "username": "bob"}),
    ]


@pytest.fixture
def group_task(make_task):
    """Group task with one header for the actor, one for bob and one unassigned."""
    return make_task(
        "g1",
        (False,),
        isGroupTask=True,
        taskHeaders=[
            {"title": "Frontend", "assignedTo": "member-1"},
            {"title": "Backend", "assignedTo": "member-2"},
            {"title": "Docs", "assignedTo": None},
        ],
    )


@pytest.fixture
def fake_gateway(sample_task, make_task):
    """Fake task service seeded with the sample task and a three-item task."""
    return FakeGateway([sample_task, make_task("t2", (False, False, False))])


@pytest.fixture
def engine(fake_gateway):
    """Store, overlay and reconciler wired to the fake task service.

    The store is seeded from the fake server and updated/deleted tasks are
    recorded in `engine.updated` / `engine.deleted`.
    """
    class Engine:
        pass

    wired = Engine()
    wired.gateway = fake_gateway
    wired.store = SnapshotStore(fake_gateway.server_tasks.values())
    wired.overlay = SpeculativeOverlay.attach(wired.store)
    wired.updated = []
    wired.deleted = []
    wired.reconciler = Reconciler(
        wired.store,
        wired.overlay,
        fake_gateway,
        on_task_updated=wired.updated.append,
        on_task_deleted=wired.deleted.append,
        remote_timeout=1.0,
    )
    return wired
