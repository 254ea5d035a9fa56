"""Bearer token authentication dependency."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from macros_chef.domain.errors import AuthenticationError
from macros_chef.domain.models import CurrentUser

if TYPE_CHECKING:
    from macros_chef.containers import AppContainer

_bearer = HTTPBearer(auto_error=False)


async def require_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> CurrentUser:
    """Resolve the calling user from the ``Authorization`` header."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Unauthorized: No token provided.")
    container: AppContainer = request.app.state.container
    return container.token_service.verify(credentials.credentials)
