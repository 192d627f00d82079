"""
Auth gate.

Resolves the calling user from the request's bearer token. Every route depends
on ``get_current_user`` so unauthenticated calls stop here with a 401.
"""
import logging
from typing import Optional

from fastapi import Header
from pydantic import BaseModel

from examprep.errors import internal_error, unauthorized
from examprep.services.supabase_client import get_supabase

logger = logging.getLogger(__name__)


class AuthUser(BaseModel):
    """The authenticated caller."""
    id: str
    email: Optional[str] = None


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user(authorization: Optional[str] = Header(default=None)) -> AuthUser:
    token = _bearer_token(authorization)
    if token is None:
        raise unauthorized()

    try:
        client = get_supabase()
    except ValueError as e:
        raise internal_error("Authentication service not configured", e)

    try:
        response = client.auth.get_user(token)
    except Exception as e:
        logger.info("Token rejected by auth service: %s", e)
        raise unauthorized()

    user = getattr(response, "user", None)
    if user is None:
        raise unauthorized()
    return AuthUser(id=str(user.id), email=user.email)
