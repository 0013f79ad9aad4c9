"""Task data model for taskboard."""

import logging
from datetime import datetime
from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


def _member_id(v):
    # Populated references arrive as member objects
    if isinstance(v, dict):
        return v.get("_id") or v.get("id")
    return v


class TaskPriority(str, Enum):
    """Task priority enumeration."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNSPECIFIED = "unspecified"


class RoadmapItem(BaseModel):
    """One checklist entry of a task roadmap (addressed by position)."""

    text: str = Field("", description="Display text")
    completed: bool = Field(False, description="Whether the item is checked off")

    @field_validator("text", mode="before")
    @classmethod
    def _coerce_text(cls, v):
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)


class TaskHeader(BaseModel):
    """Sub-assignment of a group task."""

    title: str = Field(..., description="Sub-assignment label")
    assigned_to: Optional[str] = Field(
        None, alias="assignedTo", description="Assignee member id (null when unassigned)"
    )

    @field_validator("assigned_to", mode="before")
    @classmethod
    def _coerce_assignee(cls, v):
        return _member_id(v)

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class Milestone(BaseModel):
    title: str
    due_date: Optional[datetime] = Field(None, alias="dueDate")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class Resource(BaseModel):
    """Learning resource attached to a task."""

    title: str
    url: str
    platform: str = Field("", description="Platform label (e.g. 'YouTube')")
    description: Optional[str] = None


class ResourceBundle(BaseModel):
    free: List[Resource] = Field(default_factory=list)
    paid: List[Resource] = Field(default_factory=list)


class TaskCreator(BaseModel):
    """Reference to the member who created a task."""

    id: Optional[str] = Field(None, alias="_id")
    username: str = Field("", description="Creator display handle")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class Task(BaseModel):
    """Canonical Task model as delivered by the task source.

    `overall_progress` and `completed` are derived from `roadmap_items`;
    the engine recomputes them on every speculative change.
    """

    id: Optional[str] = Field(None, alias="_id", description="Opaque unique task identifier")
    title: str = Field("", description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    priority: TaskPriority = Field(TaskPriority.UNSPECIFIED, description="Task priority")
    duration: Optional[str] = Field(None, description="Opaque display duration (e.g. '2 weeks')")
    ai_generated: bool = Field(False, alias="aiGenerated", description="Produced by the generator rather than by hand")
    is_group_task: bool = Field(False, alias="isGroupTask", description="Whether this is a shared group task")
    created_by: Optional[TaskCreator] = Field(None, alias="createdBy", description="Creator reference")
    assigned_to: Optional[str] = Field(None, alias="assignedTo", description="Direct assignee member id")
    roadmap_items: Optional[List[RoadmapItem]] = Field(
        None, alias="roadmapItems", description="Ordered roadmap checklist"
    )
    overall_progress: int = Field(0, ge=0, le=100, alias="overallProgress", description="Completion percentage")
    completed: bool = Field(False, description="True iff overall_progress == 100")
    task_headers: Optional[List[TaskHeader]] = Field(
        None, alias="taskHeaders", description="Sub-assignments for group tasks"
    )
    milestones: Optional[List[Milestone]] = Field(None, description="Ordered milestones")
    resources: Optional[ResourceBundle] = Field(None, description="Free and paid learning resources")

    @field_validator("priority", mode="before")
    @classmethod
    def _coerce_priority(cls, v):
        # Unknown or missing priorities render as unspecified
        if isinstance(v, TaskPriority):
            return v
        try:
            return TaskPriority(str(v).lower())
        except ValueError:
            return TaskPriority.UNSPECIFIED

    @field_validator("assigned_to", mode="before")
    @classmethod
    def _coerce_assignee(cls, v):
        return _member_id(v)

    @field_validator("roadmap_items", mode="before")
    @classmethod
    def _coerce_roadmap_items(cls, v):
        # Malformed entries keep their slot so positions match the task source
        if not isinstance(v, (list, tuple)):
            return v
        items = []
        for position, item in enumerate(v):
            if isinstance(item, RoadmapItem):
                items.append(item)
                continue
            if isinstance(item, dict):
                text = item.get("text")
                if not isinstance(text, str) or not text:
                    logger.warning(f"Roadmap item at position {position} has no text")
                items.append(item)
                continue
            logger.warning(f"Malformed roadmap item at position {position}: {item!r}")
            items.append({"text": item if isinstance(item, str) else ""})
        return items

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        populate_by_name = True
