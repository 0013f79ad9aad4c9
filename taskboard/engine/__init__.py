"""Optimistic update engine for taskboard."""

from taskboard.engine.progress import compute_progress, is_complete, with_derived_progress
from taskboard.engine.applier import apply_roadmap_toggle
from taskboard.engine.tracker import OpKey, PendingOperationTracker
from taskboard.engine.store import SnapshotStore, SpeculativeOverlay
from taskboard.engine.reconciler import Reconciler, ToggleOutcome
from taskboard.engine.assignment import (
    HeaderAssignment,
    is_assigned_to_actor,
    resolve_assignee_name,
    classify_header_assignment,
)
from taskboard.engine.session import TaskListSession

__all__ = [
    "compute_progress",
    "is_complete",
    "with_derived_progress",
    "apply_roadmap_toggle",
    "OpKey",
    "PendingOperationTracker",
    "SnapshotStore",
    "SpeculativeOverlay",
    "Reconciler",
    "ToggleOutcome",
    "HeaderAssignment",
    "is_assigned_to_actor",
    "resolve_assignee_name",
    "classify_header_assignment",
    "TaskListSession",
]
