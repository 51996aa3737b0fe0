import logging

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from app.core.config import settings
from app.exceptions import AuthenticationError, ForbiddenError

logger = logging.getLogger(__name__)

ROLE_STUDENT = "student"
ROLE_ADMIN = "admin"

bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    """Authenticated principal taken from the access token"""
    id: int
    role: str


def decode_access_token(token: str) -> CurrentUser:
    """Verify a JWT issued by the auth service and extract the principal

    Accepts the user id under ``sub`` or ``user_id``.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Access token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected access token: {e.__class__.__name__}")
        raise AuthenticationError("Invalid access token")

    user_id = payload.get("sub", payload.get("user_id"))
    role = payload.get("role")
    if user_id is None or not role:
        raise AuthenticationError("Invalid token: missing user id or role")

    try:
        return CurrentUser(id=int(user_id), role=str(role))
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token: malformed user id")


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    """FastAPI dependency resolving the caller"""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError()
    return decode_access_token(credentials.credentials)


def require_role(role: str):
    """Dependency factory gating an endpoint on a single role"""

    async def _require_role(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role != role:
            raise ForbiddenError(f"{role.capitalize()} access required")
        return user

    return _require_role


require_student = require_role(ROLE_STUDENT)
require_admin = require_role(ROLE_ADMIN)
