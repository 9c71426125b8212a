"""Football data service.

Mediates between UI events and the proxy:
- Competitions: fetched fresh every time (immutable snapshots)
- Teams: one list per selected competition, replaced wholesale on change
- Squads / team matches: cached per team, concurrent requests deduplicated
- Matches by date: never cached

Search across all teams fans out one squad fetch per team on a thread
pool. Results come back in completion order; nothing here sorts them.
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed

from pitchview.client.decoders import (
    TeamDetail,
    decode_competitions,
    decode_matches,
    decode_team_detail,
    decode_teams,
)
from pitchview.client.errors import PitchviewClientError
from pitchview.client.fetcher import ApiFetcher
from pitchview.client.filters import filter_players
from pitchview.client.keyed_cache import KeyedCache
from pitchview.core import Competition, DateRange, Match, Player, Team

logger = logging.getLogger(__name__)

# Squads change at most a few times a season
SQUAD_CACHE_TTL = 10 * 60
TEAM_MATCHES_CACHE_TTL = 5 * 60


class FootballDataService:
    """Client-side data access with per-team caching.

    Usage:
        service = FootballDataService(ApiFetcher("http://localhost:3000/api"))
        teams = service.load_teams(2021)
        players = service.search_players("saka", position="Offence", team_id=57)
    """

    MAX_WORKERS = 6

    def __init__(
        self,
        fetcher: ApiFetcher,
        squad_ttl: float | None = SQUAD_CACHE_TTL,
        matches_ttl: float | None = TEAM_MATCHES_CACHE_TTL,
        clock: Callable[[], float] | None = None,
    ):
        self._fetcher = fetcher
        self._lock = threading.Lock()
        self._competition_id: int | None = None
        self._teams: list[Team] = []
        self.squads = KeyedCache("squad", ttl=squad_ttl, clock=clock)
        self.team_matches = KeyedCache("team-matches", ttl=matches_ttl, clock=clock)

    @property
    def competition_id(self) -> int | None:
        return self._competition_id

    @property
    def teams(self) -> list[Team]:
        return list(self._teams)

    def team_by_id(self, team_id: int) -> Team | None:
        for team in self._teams:
            if team.id == team_id:
                return team
        return None

    # ---------- competitions & teams ----------

    def list_competitions(self) -> list[Competition]:
        """GET /competitions."""
        return decode_competitions(self._fetcher.fetch_json("/competitions"))

    def reset(self) -> None:
        """Forget the current competition and every per-team cache."""
        with self._lock:
            self._competition_id = None
            self._teams = []
        self.squads.clear()
        self.team_matches.clear()

    def load_teams(self, competition_id: int) -> list[Team]:
        """Teams for a competition.

        Switching to a different competition clears the team list and the
        squad/matches caches before the new list is fetched.
        """
        with self._lock:
            if competition_id == self._competition_id and self._teams:
                return list(self._teams)

        self.reset()
        teams = decode_teams(
            self._fetcher.fetch_json(f"/competitions/{competition_id}/teams"),
            competition_id,
        )
        with self._lock:
            self._competition_id = competition_id
            self._teams = teams
        logger.info("Loaded %d teams for competition %s", len(teams), competition_id)
        return list(teams)

    # ---------- squads ----------

    def get_team_detail(self, team_id: int) -> TeamDetail:
        """GET /teams/{id}, cached per team."""
        return self.squads.get_or_fetch(
            team_id, lambda: decode_team_detail(self._fetcher.fetch_json(f"/teams/{team_id}"))
        )

    def get_squad(self, team_id: int) -> list[Player]:
        """Squad of a team, each player labelled with the team's display name."""
        detail = self.get_team_detail(team_id)
        listed = self.team_by_id(team_id)
        team_name = listed.name if listed else detail.team.name
        return [p.with_team(team_name) for p in detail.squad]

    def get_all_squads(self, team_ids: list[int] | None = None) -> list[Player]:
        """Squads of many teams fetched concurrently.

        Teams whose squad fails to load are skipped and logged.

        Args:
            team_ids: Teams to fetch (default: every team in the current competition)

        Returns:
            All players, in completion order
        """
        if team_ids is None:
            team_ids = [t.id for t in self._teams]
        if not team_ids:
            return []

        players: list[Player] = []
        with ThreadPoolExecutor(max_workers=self.MAX_WORKERS) as executor:
            futures = {executor.submit(self.get_squad, tid): tid for tid in team_ids}
            for future in as_completed(futures):
                team_id = futures[future]
                try:
                    players.extend(future.result())
                except PitchviewClientError as e:
                    logger.warning("Skipping squad for team %s: %s", team_id, e)
        return players

    def search_players(
        self,
        search: str = "",
        position: str = "",
        team_id: int | None = None,
    ) -> list[Player]:
        """Filter one team's squad, or every squad in the competition.

        Args:
            search: Case-insensitive substring of player or team name
            position: Case-insensitive exact position
            team_id: Restrict to this team's squad; None searches all teams

        Returns:
            Matching players
        """
        if team_id is not None:
            players = self.get_squad(team_id)
        else:
            players = self.get_all_squads()
        return filter_players(players, search, position)

    # ---------- matches ----------

    def get_matches(
        self, date_range: DateRange, competition_ids: list[int] | None = None
    ) -> list[Match]:
        """GET /matches for a date range. Not cached."""
        params = date_range.as_params()
        if competition_ids:
            params["competitions"] = ",".join(str(c) for c in competition_ids)
        return decode_matches(self._fetcher.fetch_json("/matches", params=params))

    def get_team_matches(self, team_id: int, date_range: DateRange | None = None) -> list[Match]:
        """GET /teams/{id}/matches, cached per team and range."""
        params = date_range.as_params() if date_range else None
        key = (team_id, date_range.date_from, date_range.date_to) if date_range else team_id
        return self.team_matches.get_or_fetch(
            key,
            lambda: decode_matches(
                self._fetcher.fetch_json(f"/teams/{team_id}/matches", params=params)
            ),
        )
