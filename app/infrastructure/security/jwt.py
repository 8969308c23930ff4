"""JWT token creation and verification for authentication.

Tokens are issued by the identity service; this service only verifies them.
create_access_token exists for tooling and tests. Uses app.core.config for
secret and algorithm.
"""

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings


def create_access_token(
    subject: str,
    team_ids: Iterable[str],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token for a user and their team memberships.

    Args:
        subject: User id (sub claim).
        team_ids: Team ids the user belongs to (teams claim).
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    if expires_delta is not None:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(
            minutes=settings.access_token_expire_minutes
        )
    to_encode: dict[str, Any] = {"sub": subject, "teams": list(team_ids), "exp": expire}
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp and sub; teams must be a list of strings when present.

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if "sub" not in payload:
        raise ValueError("Token missing required claim: sub")
    teams = payload.get("teams", [])
    if not isinstance(teams, list) or not all(isinstance(t, str) for t in teams):
        raise ValueError("Token claim teams must be a list of team ids")
    return payload
