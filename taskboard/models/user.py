"""Actor model for taskboard."""

from typing import Optional
from pydantic import BaseModel, Field


class Actor(BaseModel):
    """The authenticated actor on whose behalf the engine runs."""

    id: str = Field(..., description="Actor identifier (matches member ids)")
    username: Optional[str] = Field(None, description="Display handle")
