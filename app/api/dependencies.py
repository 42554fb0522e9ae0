from typing import Optional

from fastapi import Header

from app.core.config import get_settings


def get_actor(x_user: Optional[str] = Header(default=None)) -> str:
    """
    Name of the acting user, recorded as created_by / updated_by.

    Authentication is handled upstream; the authenticated user name is
    forwarded in the ``X-User`` header.
    """
    return x_user or get_settings().default_actor
