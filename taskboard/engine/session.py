"""Task list session for taskboard.

Owns the snapshot and keeps it consistent with reconciled results: confirmed
updates replace tasks still in the snapshot and confirmed deletes remove them,
which in turn reseeds the overlay. Presentation code reads `tasks`, `pending_count` and `is_pending`,
and drives `toggle_roadmap_item` / `delete_task`.
"""

import logging
from typing import Callable, List, Optional, Tuple

from taskboard.models.task import Task, TaskHeader
from taskboard.models.group import GroupMember
from taskboard.engine.assignment import (
    HeaderAssignment,
    classify_header_assignment,
    is_assigned_to_actor,
    resolve_assignee_name,
)
from taskboard.engine.reconciler import Reconciler, ToggleOutcome
from taskboard.engine.store import SnapshotStore, SpeculativeOverlay
from taskboard.engine.tracker import PendingOperationTracker

logger = logging.getLogger(__name__)


class TaskListSession:
    """One actor's task list: snapshot, overlay, pending updates, members."""

    def __init__(
        self,
        gateway,
        actor_id: Optional[str] = None,
        remote_timeout: Optional[float] = None,
        on_task_updated: Optional[Callable[[Task], None]] = None,
        on_task_deleted: Optional[Callable[[str], None]] = None,
    ):
        self.gateway = gateway
        self.actor_id = actor_id
        self.store = SnapshotStore()
        self.overlay = SpeculativeOverlay.attach(self.store)
        self.tracker = PendingOperationTracker()
        self.members: Tuple[GroupMember, ...] = ()
        self._external_updated = on_task_updated
        self._external_deleted = on_task_deleted
        self.reconciler = Reconciler(
            self.store,
            self.overlay,
            gateway,
            tracker=self.tracker,
            on_task_updated=self._handle_task_updated,
            on_task_deleted=self._handle_task_deleted,
            remote_timeout=remote_timeout,
        )

    @property
    def tasks(self) -> Tuple[Task, ...]:
        """The overlay: what should be rendered right now."""
        return self.overlay.tasks

    @property
    def pending_count(self) -> int:
        return self.tracker.count

    def is_pending(self, task_id: str, item_position: int) -> bool:
        return self.reconciler.is_pending(task_id, item_position)

    def pending_positions(self, task_id: str) -> List[int]:
        """Roadmap positions of `task_id` with an update in flight."""
        return [key.item_position for key in self.tracker.pending_keys() if key.task_id == task_id]

    async def refresh(self) -> bool:
        """Reload the full collection; the previous snapshot survives a failure."""
        try:
            tasks = await self.gateway.fetch_tasks()
        except Exception as e:
            logger.error(f"Error fetching tasks: {type(e).__name__}: {str(e)}")
            return False
        self.store.replace(tasks)
        return True

    async def refresh_task(self, task_id: str) -> bool:
        """Reload one task (e.g. after group assignments changed)."""
        try:
            task = await self.gateway.fetch_task(task_id)
        except Exception as e:
            logger.error(f"Error fetching task {task_id}: {type(e).__name__}: {str(e)}")
            return False
        self.store.upsert(task)
        return True

    async def load_group_members(self) -> Tuple[GroupMember, ...]:
        """Fetch group members; any failure leaves an empty member list."""
        try:
            members = await self.gateway.fetch_group_members()
            self.members = tuple(members or ())
        except Exception as e:
            logger.error(f"Error fetching group members: {type(e).__name__}: {str(e)}")
            self.members = ()
        return self.members

    async def toggle_roadmap_item(self, task_id: str, item_position: int, current_completed: bool) -> ToggleOutcome:
        return await self.reconciler.toggle_roadmap_item(task_id, item_position, current_completed)

    async def delete_task(self, task_id: str) -> bool:
        return await self.reconciler.delete_task(task_id)

    def is_assigned_to_me(self, task: Task) -> bool:
        return is_assigned_to_actor(task, self.actor_id, self.members)

    def assignee_name(self, header: TaskHeader) -> str:
        return resolve_assignee_name(header, self.members)

    def header_assignment(self, header: TaskHeader) -> HeaderAssignment:
        return classify_header_assignment(header, self.actor_id, self.members)

    def _handle_task_updated(self, task: Task) -> None:
        # A task removed by a delete or refresh stays removed
        if not self.store.update(task):
            logger.debug(f"Confirmed task {task.id} is no longer in the snapshot")
            return
        if self._external_updated is not None:
            self._external_updated(task)

    def _handle_task_deleted(self, task_id: str) -> None:
        if not self.store.remove(task_id):
            logger.debug(f"Deleted task {task_id} was not in the snapshot")
        if self._external_deleted is not None:
            self._external_deleted(task_id)
