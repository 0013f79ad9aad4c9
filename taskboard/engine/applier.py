"""Speculative roadmap mutations for taskboard.

Applies a single roadmap toggle to an overlay without performing I/O.
Overlays are tuples; the touched task is copied, everything else is shared.
"""

import logging
from typing import Sequence, Tuple

from taskboard.models.task import Task
from taskboard.engine.progress import with_derived_progress

logger = logging.getLogger(__name__)


def apply_roadmap_toggle(
    overlay: Sequence[Task],
    task_id: str,
    item_position: int,
    completed: bool,
) -> Tuple[Tuple[Task, ...], bool]:
    """Set one roadmap item's completed flag and recompute derived fields.

    Fails (returns the overlay unchanged and False) when:
    1. No task with `task_id` exists in the overlay
    2. The task has no roadmap item list
    3. `item_position` is outside [0, len(roadmap_items))

    Args:
        overlay: Current speculative task collection
        task_id: Identifier of the task to mutate
        item_position: Zero-based roadmap item position
        completed: New completed value for the item

    Returns:
        Tuple of (new_overlay, ok)
    """
    tasks = tuple(overlay)

    index = next((i for i, task in enumerate(tasks) if task.id == task_id), None)
    if index is None:
        logger.warning(f"Roadmap toggle for unknown task {task_id}")
        return tasks, False

    task = tasks[index]
    items = task.roadmap_items
    if items is None or not isinstance(items, (list, tuple)):
        logger.warning(f"Invalid roadmap items structure for task: {task.title}")
        return tasks, False

    # bool is an int subclass; a flag is never a position
    if isinstance(item_position, bool) or not isinstance(item_position, int):
        logger.warning(f"Invalid item position {item_position!r} for task: {task.title}")
        return tasks, False
    if item_position < 0 or item_position >= len(items):
        logger.warning(f"Invalid item position {item_position} for task: {task.title}")
        return tasks, False

    new_items = list(items)
    new_items[item_position] = items[item_position].model_copy(update={"completed": completed})
    updated = with_derived_progress(task.model_copy(update={"roadmap_items": new_items}))
    return tasks[:index] + (updated,) + tasks[index + 1:], True
