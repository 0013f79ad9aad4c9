"""Group membership models for taskboard."""

from typing import List, Optional
from pydantic import BaseModel, Field


class GroupMember(BaseModel):
    """Member of the actor's group (used to resolve assignee references)."""

    id: str = Field(..., alias="_id", description="Member identifier")
    username: str = Field(..., description="Display handle")

    class Config:
        """Pydantic configuration."""
        populate_by_name = True


class Group(BaseModel):
    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None
    members: List[GroupMember] = Field(default_factory=list)

    class Config:
        """Pydantic configuration."""
        populate_by_name = True
