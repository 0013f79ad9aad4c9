"""Bearer token verification for taskboard.

Tokens are issued by the task service; this module only verifies them and
reads the actor identifier from the `sub` claim.
"""

import logging
import os
import jwt
from typing import Optional, Dict
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Shared with the task service that signs the tokens
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")


def decode_access_token(token: str) -> Optional[Dict]:
    """Verify a bearer token that must carry a `sub` claim.

    Returns:
        Decoded claims, or None if the signature, expiry or claims are invalid
    """
    try:
        return jwt.decode(
            token,
            JWT_SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["sub"]},
        )
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected bearer token: {type(e).__name__}: {str(e)}")
        return None


def get_user_id_from_token(token: str) -> Optional[str]:
    """Actor ID from the token's `sub` claim, or None if it is not a non-empty string."""
    payload = decode_access_token(token)
    if not payload:
        return None
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return subject
