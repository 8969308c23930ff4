"""Auth dependencies: caller identity from the bearer token and team access checks."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.dtos.user import CurrentUser
from app.domain.exceptions import AuthenticationException, AuthorizationException
from app.infrastructure.security.jwt import verify_token

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> CurrentUser:
    """Return the caller from the JWT; raise 401 if missing or invalid."""
    if not credentials:
        raise AuthenticationException("Not authenticated")
    try:
        payload = verify_token(credentials.credentials)
    except ValueError as e:
        raise AuthenticationException(str(e)) from e
    return CurrentUser(
        id=str(payload["sub"]),
        team_ids=frozenset(payload.get("teams", [])),
    )


def ensure_team_access(user: CurrentUser, team_id: str, resource: str) -> None:
    """Raise 403 unless the caller belongs to team_id."""
    if not user.is_member_of(team_id):
        raise AuthorizationException(resource, team_id)
