"""Authentication context for taskboard."""

import os
from typing import Optional
from dotenv import load_dotenv

from taskboard.auth.jwt import get_user_id_from_token
from taskboard.models.user import Actor

load_dotenv()


class AuthContext:
    """Bearer token plus the actor it identifies.

    An absent actor means nothing may be rendered or toggled; callers check
    `is_authenticated` before building a session.
    """

    def __init__(self, token: Optional[str] = None, actor_id: Optional[str] = None):
        self.token = token
        self.actor_id = actor_id if actor_id is not None else (
            get_user_id_from_token(token) if token else None
        )

    @classmethod
    def from_env(cls) -> "AuthContext":
        """Build the context from TASKBOARD_API_TOKEN."""
        return cls(token=os.getenv("TASKBOARD_API_TOKEN"))

    @property
    def is_authenticated(self) -> bool:
        return bool(self.actor_id)

    @property
    def actor(self) -> Optional[Actor]:
        return Actor(id=self.actor_id) if self.actor_id else None
