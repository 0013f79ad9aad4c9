"""Derived progress fields for taskboard tasks.

`overall_progress` and `completed` are never set independently; they are a
pure function of the roadmap item sequence.
"""

from typing import Optional, Sequence

from taskboard.models.task import Task, RoadmapItem
from taskboard.models.constants import PROGRESS_COMPLETE


def compute_progress(items: Optional[Sequence[RoadmapItem]]) -> int:
    """Compute the completion percentage of a roadmap.

    Rounds half up (12.5 -> 13) using integer arithmetic.

    Args:
        items: Roadmap items (None or empty means no progress)

    Returns:
        Integer percentage in [0, 100]
    """
    if not items:
        return 0

    total = len(items)
    done = sum(1 for item in items if item.completed)
    return (200 * done + total) // (2 * total)


def is_complete(progress: int) -> bool:
    """A task is completed iff its progress is exactly 100."""
    return progress == PROGRESS_COMPLETE


def with_derived_progress(task: Task) -> Task:
    """Return a copy of `task` whose derived fields match its roadmap."""
    progress = compute_progress(task.roadmap_items)
    return task.model_copy(
        update={"overall_progress": progress, "completed": is_complete(progress)}
    )
