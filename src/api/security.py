"""Session gate: bearer token authentication dependencies.

get_current_user_id is the boundary check every protected route depends on.
It turns an ``Authorization: Bearer <token>`` header into a trusted user id,
or rejects the request with 401 before any handler logic runs. Missing
header, wrong scheme, bad signature, tampering and expiry all produce the
same response.
"""

import logging
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.dependencies import get_auth_service
from api.models import UserResponse
from domain.model.errors import TokenError, UnauthorizedError
from domain.model.user import User
from services.auth_service import AuthService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized() -> UnauthorizedError:
    # api.errors turns this into 401 with a WWW-Authenticate: Bearer header
    return UnauthorizedError("Not authenticated")


def to_user_response(user: User) -> UserResponse:
    """Convert domain User to API UserResponse."""
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        created_at=user.created_at,
    )


def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> str:
    """Authenticate the request and return the caller's user id.

    Also stores the id on request.state.user_id for code that only has the
    request at hand.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized()

    try:
        claims = auth_service.verify_token(credentials.credentials)
    except TokenError:
        logger.info("Rejected bearer token", extra={"path": request.url.path})
        raise _unauthorized()

    request.state.user_id = claims.sub
    return claims.sub


def get_current_user(
    user_id: str = Depends(get_current_user_id),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Resolve the authenticated caller's profile. 401 if the user is gone."""
    user = auth_service.get_user_by_id(user_id)
    if user is None:
        raise _unauthorized()
    return to_user_response(user)
