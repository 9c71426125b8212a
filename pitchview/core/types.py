"""Domain types for football data.

Immutable snapshots decoded from the upstream API. Nothing here is mutated
after decoding - a fresh fetch produces fresh objects.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime


@dataclass(frozen=True)
class Competition:
    """A competition (league or cup)."""

    id: int
    name: str
    code: str | None = None
    logo_url: str | None = None
    area: str | None = None


@dataclass(frozen=True)
class Team:
    """A team as listed by a competition.

    competition_id is the competition it was browsed under, not an
    exclusive membership - the same club appears in several competitions.
    """

    id: int
    name: str
    short_name: str | None = None
    tla: str | None = None
    crest_url: str | None = None
    competition_id: int | None = None


@dataclass(frozen=True)
class Player:
    """A squad member.

    team_name is denormalized at display time from the team being browsed.
    """

    name: str
    position: str | None = None
    id: int | None = None
    nationality: str | None = None
    date_of_birth: str | None = None
    team_name: str = ""

    def with_team(self, team_name: str) -> "Player":
        """Copy of this player labelled with a team display name."""
        return replace(self, team_name=team_name)


@dataclass(frozen=True)
class Score:
    """Full-time score. Both sides are None before kickoff."""

    home: int | None = None
    away: int | None = None

    @property
    def is_known(self) -> bool:
        return self.home is not None and self.away is not None


@dataclass(frozen=True)
class Match:
    """A scheduled or played match."""

    id: int
    kickoff: datetime
    home_team: Team
    away_team: Team
    competition: Competition | None = None
    status: str = "SCHEDULED"
    score: Score = field(default_factory=Score)
    matchday: int | None = None


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range used for match queries."""

    date_from: date
    date_to: date

    def __post_init__(self):
        if self.date_to < self.date_from:
            raise ValueError(f"date_to {self.date_to} is before date_from {self.date_from}")

    @classmethod
    def single(cls, day: date) -> "DateRange":
        """Range covering exactly one day (dateFrom == dateTo)."""
        return cls(day, day)

    def as_params(self) -> dict[str, str]:
        """Upstream query parameters for this range."""
        return {
            "dateFrom": self.date_from.isoformat(),
            "dateTo": self.date_to.isoformat(),
        }
