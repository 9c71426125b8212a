"""Decode upstream payloads into core types.

One decoder per endpoint. Each endpoint's response shape is fixed, so a
payload missing its list key is an error rather than something to guess at.
"""

from dataclasses import dataclass, field
from datetime import datetime

from dateutil import parser

from pitchview.client.errors import DecodeError
from pitchview.core import Competition, Match, Player, Score, Team


@dataclass(frozen=True)
class TeamDetail:
    """Decoded /teams/{id} response: the team plus its squad."""

    team: Team
    squad: list[Player] = field(default_factory=list)


def _require_list(payload: dict, key: str, endpoint: str) -> list[dict]:
    if not isinstance(payload, dict):
        raise DecodeError(f"{endpoint}: expected a JSON object, got {type(payload).__name__}")
    items = payload.get(key)
    if not isinstance(items, list):
        raise DecodeError(f"{endpoint}: response has no '{key}' list")
    return items


def dict_to_competition(data: dict) -> Competition:
    area = data.get("area") or {}
    return Competition(
        id=data["id"],
        name=data["name"],
        code=data.get("code"),
        logo_url=data.get("emblem"),
        area=area.get("name"),
    )


def dict_to_team(data: dict, competition_id: int | None = None) -> Team:
    return Team(
        id=data["id"],
        name=data.get("name") or data.get("shortName") or "",
        short_name=data.get("shortName"),
        tla=data.get("tla"),
        crest_url=data.get("crest"),
        competition_id=competition_id,
    )


def dict_to_player(data: dict, team_name: str = "") -> Player:
    return Player(
        id=data.get("id"),
        name=data.get("name") or "",
        position=data.get("position"),
        nationality=data.get("nationality"),
        date_of_birth=data.get("dateOfBirth"),
        team_name=team_name,
    )


def _parse_kickoff(value: str) -> datetime:
    # Upstream sends ISO 8601 with a trailing Z
    return parser.isoparse(value)


def dict_to_match(data: dict) -> Match:
    competition = data.get("competition")
    full_time = (data.get("score") or {}).get("fullTime") or {}
    return Match(
        id=data["id"],
        kickoff=_parse_kickoff(data["utcDate"]),
        home_team=dict_to_team(data["homeTeam"]),
        away_team=dict_to_team(data["awayTeam"]),
        competition=dict_to_competition(competition) if competition else None,
        status=data.get("status", "SCHEDULED"),
        score=Score(home=full_time.get("home"), away=full_time.get("away")),
        matchday=data.get("matchday"),
    )


def decode_competitions(payload: dict) -> list[Competition]:
    """Decode GET /competitions."""
    try:
        entries = _require_list(payload, "competitions", "competitions")
        return [dict_to_competition(c) for c in entries]
    except (KeyError, TypeError) as e:
        raise DecodeError(f"competitions: malformed entry ({e})") from e


def decode_teams(payload: dict, competition_id: int | None = None) -> list[Team]:
    """Decode GET /competitions/{id}/teams."""
    try:
        return [dict_to_team(t, competition_id) for t in _require_list(payload, "teams", "teams")]
    except (KeyError, TypeError) as e:
        raise DecodeError(f"teams: malformed entry ({e})") from e


def decode_team_detail(payload: dict) -> TeamDetail:
    """Decode GET /teams/{id}.

    A team without a squad key decodes to an empty squad - the upstream
    omits it for some national and youth teams.
    """
    if not isinstance(payload, dict):
        raise DecodeError(f"team: expected a JSON object, got {type(payload).__name__}")
    try:
        team = dict_to_team(payload)
        squad_data = payload.get("squad") or []
        if not isinstance(squad_data, list):
            raise DecodeError("team: 'squad' is not a list")
        squad = [dict_to_player(p, team.name) for p in squad_data]
    except (KeyError, TypeError) as e:
        raise DecodeError(f"team: malformed payload ({e})") from e
    return TeamDetail(team=team, squad=squad)


def decode_matches(payload: dict) -> list[Match]:
    """Decode GET /matches and GET /teams/{id}/matches."""
    try:
        return [dict_to_match(m) for m in _require_list(payload, "matches", "matches")]
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"matches: malformed entry ({e})") from e
