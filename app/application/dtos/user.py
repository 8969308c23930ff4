"""DTOs for the authenticated caller (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrentUser:
    """Caller identity from the bearer token: user id plus the teams they belong to."""

    id: str
    team_ids: frozenset[str]

    def is_member_of(self, team_id: str) -> bool:
        return team_id in self.team_ids
