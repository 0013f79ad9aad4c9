"""Confirmed and speculative task collections for taskboard.

The SnapshotStore holds the last authoritative collection and is only ever
replaced wholesale. The SpeculativeOverlay is the collection that gets
rendered; it is reseeded from the snapshot whenever the snapshot changes,
discarding local edits that have not been confirmed yet.
"""

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from taskboard.models.task import Task

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[Tuple[Task, ...]], None]


def _valid_tasks(tasks: Iterable[Task]) -> Tuple[Task, ...]:
    """Drop entries that have no identifier."""
    valid: List[Task] = []
    for task in tasks:
        if task is None or not getattr(task, "id", None):
            logger.warning(f"Dropping invalid task without identifier: {task!r}")
            continue
        valid.append(task)
    return tuple(valid)


class SnapshotStore:
    """Last task collection received from the task source."""

    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: Tuple[Task, ...] = tuple(tasks)
        self._version = 0
        self._listeners: List[SnapshotListener] = []

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return self._tasks

    @property
    def version(self) -> int:
        """Incremented on every replacement."""
        return self._version

    def get(self, task_id: str) -> Optional[Task]:
        return next((task for task in self._tasks if task.id == task_id), None)

    def subscribe(self, listener: SnapshotListener) -> None:
        """Register a callable invoked with the new collection on every change."""
        self._listeners.append(listener)

    def replace(self, tasks: Iterable[Task]) -> None:
        """Replace the whole collection (initial load or refresh)."""
        self._tasks = tuple(tasks)
        self._version += 1
        logger.debug(f"Snapshot replaced with {len(self._tasks)} tasks (version {self._version})")
        for listener in list(self._listeners):
            listener(self._tasks)

    def upsert(self, task: Task) -> None:
        """Replace the task with the same id, or append it."""
        if not task.id:
            logger.warning(f"Refusing to store task without identifier: {task.title}")
            return
        if self.get(task.id) is None:
            self.replace(self._tasks + (task,))
        else:
            self.replace(task if t.id == task.id else t for t in self._tasks)

    def update(self, task: Task) -> bool:
        """Replace the task with the same id; never appends.

        Returns:
            False if the task is not (or no longer) in the snapshot
        """
        if not task.id or self.get(task.id) is None:
            return False
        self.replace(task if t.id == task.id else t for t in self._tasks)
        return True

    def remove(self, task_id: str) -> bool:
        """Remove a task; False if it was not present."""
        remaining = tuple(t for t in self._tasks if t.id != task_id)
        if len(remaining) == len(self._tasks):
            return False
        self.replace(remaining)
        return True


class SpeculativeOverlay:
    """Working copy of the task collection carrying optimistic edits."""

    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: Tuple[Task, ...] = _valid_tasks(tasks)

    @classmethod
    def attach(cls, store: SnapshotStore) -> "SpeculativeOverlay":
        """Create an overlay seeded from `store` that reseeds on every change."""
        overlay = cls(store.tasks)
        store.subscribe(overlay.reseed)
        return overlay

    @property
    def tasks(self) -> Tuple[Task, ...]:
        """Read-only view of the current overlay."""
        return self._tasks

    def get(self, task_id: str) -> Optional[Task]:
        return next((task for task in self._tasks if task.id == task_id), None)

    def reseed(self, tasks: Iterable[Task]) -> None:
        """Discard all speculative state and copy `tasks`."""
        self._tasks = _valid_tasks(tasks)
        logger.debug(f"Overlay reseeded with {len(self._tasks)} tasks")

    def replace(self, tasks: Iterable[Task]) -> None:
        """Install an overlay produced by the mutation applier."""
        self._tasks = _valid_tasks(tasks)

    def replace_task(self, task: Task) -> bool:
        """Swap in `task` for the overlay entry with the same id.

        Returns:
            False if no such task is currently in the overlay
        """
        if not task.id or self.get(task.id) is None:
            return False
        self._tasks = tuple(task if t.id == task.id else t for t in self._tasks)
        return True

    def __len__(self) -> int:
        return len(self._tasks)
