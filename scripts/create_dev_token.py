"""Print a bearer token for local development (tokens are normally issued by the identity service).

Usage:
    uv run python -m scripts.create_dev_token <user_id> <team_id> [team_id ...]
Signs with SECRET_KEY, so the running API accepts it.
"""

import sys

from app.core.config import get_settings
from app.infrastructure.security.jwt import create_access_token


def main() -> None:
    """Encode sub + teams claims and print the token."""
    if len(sys.argv) < 3:
        print(
            "Usage: uv run python -m scripts.create_dev_token <user_id> <team_id> [team_id ...]",
            file=sys.stderr,
        )
        sys.exit(1)
    user_id = sys.argv[1]
    team_ids = sys.argv[2:]

    settings = get_settings()
    token = create_access_token(user_id, team_ids)
    print(f"Token for {user_id} (teams: {', '.join(team_ids)}), valid {settings.access_token_expire_minutes} min:")
    print(token)


if __name__ == "__main__":
    main()
