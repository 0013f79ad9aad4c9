"""Pending-operation tracking for taskboard.

At most one update may be in flight per (task, roadmap position) key.
"""

import logging
from typing import NamedTuple, Set, Tuple

logger = logging.getLogger(__name__)


class OpKey(NamedTuple):
    """Identifies one de-duplicated roadmap mutation stream."""
    task_id: str
    item_position: int


class PendingOperationTracker:
    """Set of in-flight operation keys with an acquire/release contract."""

    def __init__(self):
        self._pending: Set[OpKey] = set()

    def try_acquire(self, op_key: OpKey) -> bool:
        """Claim `op_key`; False if an operation for it is already in flight."""
        if op_key in self._pending:
            logger.debug(f"Update already in flight for {op_key}")
            return False
        self._pending.add(op_key)
        logger.debug(f"Acquired {op_key} ({len(self._pending)} pending)")
        return True

    def release(self, op_key: OpKey) -> None:
        """Release a previously acquired key."""
        if op_key not in self._pending:
            logger.warning(f"Release of {op_key} which is not pending")
            return
        self._pending.discard(op_key)
        logger.debug(f"Released {op_key} ({len(self._pending)} pending)")

    def is_pending(self, op_key: OpKey) -> bool:
        return op_key in self._pending

    @property
    def count(self) -> int:
        """Number of updates in flight (the "N updating" indicator)."""
        return len(self._pending)

    def pending_keys(self) -> Tuple[OpKey, ...]:
        """Snapshot of the pending keys, ordered for stable display."""
        return tuple(sorted(self._pending))

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, op_key) -> bool:
        return op_key in self._pending
