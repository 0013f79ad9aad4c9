"""Data models for taskboard."""

from taskboard.models.task import (
    Task,
    TaskPriority,
    RoadmapItem,
    TaskHeader,
    Milestone,
    Resource,
    ResourceBundle,
    TaskCreator,
)
from taskboard.models.group import Group, GroupMember
from taskboard.models.user import Actor

__all__ = [
    "Task",
    "TaskPriority",
    "RoadmapItem",
    "TaskHeader",
    "Milestone",
    "Resource",
    "ResourceBundle",
    "TaskCreator",
    "Group",
    "GroupMember",
    "Actor",
]
