"""Optimistic update reconciliation for taskboard.

A roadmap toggle moves through:
Idle -> Applying -> AwaitingRemote -> Confirmed | RolledBack

1. Idle: claim the (task, position) key; a toggle already in flight wins and
   later toggles for the same key are dropped, not queued.
2. Applying: apply the toggle to the overlay without I/O.
3. AwaitingRemote: send the update (the only suspension point), bounded by
   `remote_timeout`.
4. Confirmed: install the server's canonical task and notify listeners.
5. RolledBack: reseed the whole overlay from the current snapshot.
6. The key is released on every exit path.

Deletes are not optimistic: the task stays visible until the server confirms.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

from taskboard.models.task import Task
from taskboard.models.constants import DEFAULT_REMOTE_TIMEOUT_SEC
from taskboard.engine.applier import apply_roadmap_toggle
from taskboard.engine.store import SnapshotStore, SpeculativeOverlay
from taskboard.engine.tracker import OpKey, PendingOperationTracker
from taskboard.integrations.task_api import TaskApiError

logger = logging.getLogger(__name__)


class ToggleOutcome(str, Enum):
    """Terminal state of a roadmap toggle."""
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"
    DUPLICATE = "duplicate"
    INVALID = "invalid"


class Reconciler:
    """Drives speculative roadmap updates against a remote gateway.

    The gateway is any object exposing two coroutines:
    - `update_roadmap_item(task_id, item_position, completed) -> Task`
    - `delete_task(task_id) -> None`
    Both raise on transport failure or a non-success response.
    """

    def __init__(
        self,
        store: SnapshotStore,
        overlay: SpeculativeOverlay,
        gateway,
        tracker: Optional[PendingOperationTracker] = None,
        on_task_updated: Optional[Callable[[Task], None]] = None,
        on_task_deleted: Optional[Callable[[str], None]] = None,
        remote_timeout: Optional[float] = None,
    ):
        self.store = store
        self.overlay = overlay
        self.gateway = gateway
        self.tracker = tracker if tracker is not None else PendingOperationTracker()
        self.on_task_updated = on_task_updated
        self.on_task_deleted = on_task_deleted
        self.remote_timeout = remote_timeout if remote_timeout is not None else DEFAULT_REMOTE_TIMEOUT_SEC

    async def toggle_roadmap_item(
        self,
        task_id: str,
        item_position: int,
        current_completed: bool,
    ) -> ToggleOutcome:
        """Flip one roadmap item optimistically and reconcile with the server.

        Args:
            task_id: Task identifier
            item_position: Zero-based roadmap item position
            current_completed: The item's completed flag as currently displayed

        Returns:
            The ToggleOutcome reached. Never raises (except on cancellation).
        """
        op_key = OpKey(task_id, item_position)
        if not self.tracker.try_acquire(op_key):
            return ToggleOutcome.DUPLICATE

        new_completed = not current_completed
        try:
            overlay, ok = apply_roadmap_toggle(self.overlay.tasks, task_id, item_position, new_completed)
            if not ok:
                logger.warning(f"Roadmap toggle aborted for task {task_id} item {item_position}")
                return ToggleOutcome.INVALID
            self.overlay.replace(overlay)

            try:
                canonical = await asyncio.wait_for(
                    self.gateway.update_roadmap_item(task_id, item_position, new_completed),
                    timeout=self.remote_timeout,
                )
                if not isinstance(canonical, Task) or canonical.id != task_id:
                    raise TaskApiError(f"Malformed canonical task for {task_id}: {canonical!r}")
            except asyncio.TimeoutError:
                logger.error(
                    f"Roadmap update for task {task_id} item {item_position} "
                    f"timed out after {self.remote_timeout}s; rolling back"
                )
                self._rollback()
                return ToggleOutcome.ROLLED_BACK
            except asyncio.CancelledError:
                logger.warning(f"Roadmap update for task {task_id} item {item_position} cancelled; rolling back")
                self._rollback()
                raise
            except Exception as e:
                logger.error(
                    f"Error updating roadmap item {item_position} of task {task_id}: "
                    f"{type(e).__name__}: {str(e)}"
                )
                self._rollback()
                return ToggleOutcome.ROLLED_BACK

            if not self.overlay.replace_task(canonical):
                logger.debug(f"Task {task_id} left the overlay before confirmation")
            logger.debug(
                f"Confirmed roadmap item {item_position} of task {task_id} "
                f"({canonical.overall_progress}%)"
            )
            self._notify(self.on_task_updated, canonical)
            return ToggleOutcome.CONFIRMED
        finally:
            self.tracker.release(op_key)

    async def delete_task(self, task_id: str) -> bool:
        """Delete a task remotely; local state changes only via the listener.

        Returns:
            True if the server confirmed the delete
        """
        try:
            await asyncio.wait_for(self.gateway.delete_task(task_id), timeout=self.remote_timeout)
        except asyncio.TimeoutError:
            logger.error(f"Delete of task {task_id} timed out after {self.remote_timeout}s")
            return False
        except Exception as e:
            logger.error(f"Error deleting task {task_id}: {type(e).__name__}: {str(e)}")
            return False

        logger.debug(f"Deleted task {task_id}")
        self._notify(self.on_task_deleted, task_id)
        return True

    def is_pending(self, task_id: str, item_position: int) -> bool:
        return self.tracker.is_pending(OpKey(task_id, item_position))

    @property
    def pending_count(self) -> int:
        return self.tracker.count

    def _rollback(self) -> None:
        """Discard every speculative edit and reseed from the snapshot."""
        self.overlay.reseed(self.store.tasks)
        logger.warning(f"Overlay rolled back to snapshot version {self.store.version}")

    def _notify(self, callback, payload) -> None:
        if callback is None:
            return
        try:
            callback(payload)
        except Exception as e:
            logger.error(f"Error in {getattr(callback, '__name__', 'listener')} callback: {type(e).__name__}: {str(e)}")
