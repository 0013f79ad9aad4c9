"""Assignment resolution for taskboard.

Answers whether a task (or one of its group sub-assignments) is bound to the
current actor, and resolves assignee references to display handles.

Every function here is total: malformed tasks, headers or member lists
degrade to "not assigned" / "Unassigned" instead of raising.
"""

import logging
from enum import Enum
from typing import Any, Iterable, Optional

from taskboard.models.constants import UNASSIGNED_LABEL

logger = logging.getLogger(__name__)


class HeaderAssignment(str, Enum):
    """Who a group sub-assignment is bound to, from the actor's viewpoint."""
    MINE = "mine"
    MEMBER = "member"
    UNASSIGNED = "unassigned"


def _field(obj: Any, name: str, alias: Optional[str] = None) -> Any:
    """Read a field from a pydantic model or a wire mapping."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        if name in obj:
            return obj[name]
        return obj.get(alias) if alias else None
    return getattr(obj, name, None)


def is_assigned_to_actor(task: Any, actor_id: Optional[str], members: Optional[Iterable[Any]] = None) -> bool:
    """Check if a task is assigned to the actor.

    A task is assigned to the actor if:
    1. Its direct assignee is the actor
    2. OR it is a group task and any of its headers is assigned to the actor

    Args:
        task: Task model or wire mapping
        actor_id: Current actor identifier (None disables every match)
        members: Group members; accepted for symmetry with the name lookup

    Returns:
        True if assigned to the actor, False otherwise (including bad input)
    """
    if not actor_id:
        return False

    try:
        if _field(task, "assigned_to", "assignedTo") == actor_id:
            return True

        headers = _field(task, "task_headers", "taskHeaders")
        if _field(task, "is_group_task", "isGroupTask") and isinstance(headers, (list, tuple)):
            return any(_field(header, "assigned_to", "assignedTo") == actor_id for header in headers)
    except (AttributeError, TypeError) as e:
        logger.warning(f"Error checking task assignment: {type(e).__name__}: {str(e)}")

    return False


def find_member(member_id: Optional[str], members: Optional[Iterable[Any]]) -> Optional[Any]:
    """Find the member with `member_id` without mutating `members`."""
    if not member_id or members is None:
        return None
    try:
        for member in members:
            if _field(member, "id", "_id") == member_id:
                return member
    except TypeError:
        logger.warning(f"Malformed group member list: {members!r}")
    return None


def resolve_assignee_name(header: Any, members: Optional[Iterable[Any]]) -> str:
    """Resolve a header's assignee to a display handle.

    Returns:
        The member's username, or UNASSIGNED_LABEL when nobody matches
    """
    member = find_member(_field(header, "assigned_to", "assignedTo"), members)
    username = _field(member, "username")
    return username if username else UNASSIGNED_LABEL


def classify_header_assignment(
    header: Any,
    actor_id: Optional[str],
    members: Optional[Iterable[Any]],
) -> HeaderAssignment:
    """Classify a sub-assignment as the actor's, another member's, or nobody's."""
    assignee = _field(header, "assigned_to", "assignedTo")
    if actor_id and assignee == actor_id:
        return HeaderAssignment.MINE
    if find_member(assignee, members) is not None:
        return HeaderAssignment.MEMBER
    return HeaderAssignment.UNASSIGNED
