"""Browsing session: selection state and what the viewer shows.

Selection flow:
    NO_COMPETITION -> COMPETITION_SELECTED -> TEAM_SELECTED
    COMPETITION_SELECTED -> NO_COMPETITION   (competition cleared)
    TEAM_SELECTED -> COMPETITION_SELECTED    (team cleared)

Competition, team and position changes refresh the player list right away.
Search text changes are debounced. Failures never reach the viewer: they are
logged and the affected list is shown empty.

Player refreshes are numbered. A refresh that finishes after a newer one
has started is discarded, so a slow early response cannot overwrite a
later one.
"""

import logging
import threading
from collections.abc import Callable
from datetime import date
from enum import Enum

from pitchview.client.debounce import DEFAULT_WAIT, Debouncer
from pitchview.client.errors import PitchviewClientError
from pitchview.client.filters import filter_players
from pitchview.client.service import FootballDataService
from pitchview.core import Competition, DateRange, Match, Player, Team
from pitchview.utilities.dates import day_range, past_weekend_range, today_range

logger = logging.getLogger(__name__)

NO_PLAYERS_MESSAGE = "No players found."
SELECT_TEAM_MESSAGE = "Please select a team first."
NO_MATCHES_MESSAGE = "No matches found."


class SelectionState(str, Enum):
    NO_COMPETITION = "no_competition"
    COMPETITION_SELECTED = "competition_selected"
    TEAM_SELECTED = "team_selected"


class BrowserSession:
    """State of one viewer session, from page load until navigation away.

    Usage:
        session = BrowserSession(service)
        session.load_competitions()
        session.select_competition(2021)
        session.select_team(57)
        session.set_search("sak")   # debounced
    """

    def __init__(
        self,
        service: FootballDataService,
        debounce_wait: float = DEFAULT_WAIT,
        today: Callable[[], date] = date.today,
    ):
        self._service = service
        self._today = today
        self._lock = threading.Lock()
        self._generation = 0
        self._search_debouncer = Debouncer(self.refresh_players, wait=debounce_wait)

        self.state = SelectionState.NO_COMPETITION
        self.competitions: list[Competition] = []
        self.competition_id: int | None = None
        self.teams: list[Team] = []
        self.team_id: int | None = None
        self.squad: list[Player] = []
        self.search = ""
        self.position = ""
        self.players: list[Player] = []
        self.message: str | None = None
        self.matches: list[Match] = []
        self.match_message: str | None = None
        self.last_match_range: DateRange | None = None

    @property
    def search_debouncer(self) -> Debouncer:
        return self._search_debouncer

    # ---------- selection ----------

    def load_competitions(self) -> list[Competition]:
        try:
            self.competitions = self._service.list_competitions()
        except PitchviewClientError as e:
            logger.error("[SESSION] Could not load competitions: %s", e)
            self.competitions = []
        return self.competitions

    def select_competition(self, competition_id: int | None) -> None:
        """Select a competition (None clears it).

        Any previous team list and squads are dropped before the new
        competition's teams are loaded.
        """
        if competition_id is None:
            self.clear_competition()
            return

        self._service.reset()
        self.teams = []
        self.team_id = None
        self.squad = []
        self.competition_id = competition_id
        self.state = SelectionState.COMPETITION_SELECTED
        logger.info("[SESSION] Competition %s selected", competition_id)

        try:
            self.teams = self._service.load_teams(competition_id)
        except PitchviewClientError as e:
            logger.error("[SESSION] Could not load teams for %s: %s", competition_id, e)
            self.teams = []
        self.refresh_players()

    def clear_competition(self) -> None:
        self._search_debouncer.cancel()
        self._service.reset()
        self.competition_id = None
        self.teams = []
        self.team_id = None
        self.squad = []
        self.state = SelectionState.NO_COMPETITION
        self.refresh_players()

    def select_team(self, team_id: int | None) -> None:
        """Select a team (None clears it) and load its squad."""
        if team_id is None:
            self.clear_team()
            return
        if self.state == SelectionState.NO_COMPETITION:
            raise ValueError("Select a competition before selecting a team")

        self.team_id = team_id
        self.state = SelectionState.TEAM_SELECTED
        logger.info("[SESSION] Team %s selected", team_id)

        try:
            self.squad = self._service.get_squad(team_id)
        except PitchviewClientError as e:
            logger.error("[SESSION] Could not load squad for team %s: %s", team_id, e)
            self.squad = []
        self.refresh_players()

    def clear_team(self) -> None:
        if self.state != SelectionState.TEAM_SELECTED:
            return
        self.team_id = None
        self.squad = []
        self.state = SelectionState.COMPETITION_SELECTED
        self.refresh_players()

    # ---------- search ----------

    def set_search(self, text: str) -> None:
        """Update the search text; the refresh runs once typing pauses."""
        self.search = text or ""
        self._search_debouncer()

    def set_position(self, position: str) -> None:
        self.position = position or ""
        self.refresh_players()

    def refresh_players(self) -> list[Player]:
        """Recompute the player list for the current selection and filters."""
        with self._lock:
            self._generation += 1
            generation = self._generation
            search = self.search
            position = self.position
            state = self.state
            squad = list(self.squad)

        players: list[Player] = []
        message: str | None = None
        if state == SelectionState.TEAM_SELECTED:
            # The squad was loaded by select_team; a failed load stays empty
            players = filter_players(squad, search, position)
        elif state == SelectionState.COMPETITION_SELECTED and search.strip():
            players = self._query_players(search, position)
        else:
            message = SELECT_TEAM_MESSAGE

        if message is None and not players:
            message = NO_PLAYERS_MESSAGE

        with self._lock:
            if generation != self._generation:
                logger.debug("[SESSION] Discarding stale player result #%d", generation)
                return self.players
            self.players = players
            self.message = message
        return players

    def _query_players(self, search: str, position: str) -> list[Player]:
        try:
            return self._service.search_players(search, position)
        except PitchviewClientError as e:
            logger.error("[SESSION] Player query failed: %s", e)
            return []

    # ---------- matches ----------

    def show_matches(self, date_range: DateRange) -> list[Match]:
        """Load matches for a date range and remember it for refresh."""
        self.last_match_range = date_range
        try:
            self.matches = self._service.get_matches(date_range)
        except PitchviewClientError as e:
            logger.error("[SESSION] Could not load matches for %s: %s", date_range, e)
            self.matches = []
        self.match_message = None if self.matches else NO_MATCHES_MESSAGE
        return self.matches

    def show_matches_on(self, day: date | str) -> list[Match]:
        return self.show_matches(day_range(day))

    def show_today(self) -> list[Match]:
        return self.show_matches(today_range(self._today()))

    def show_past_weekend(self) -> list[Match]:
        return self.show_matches(past_weekend_range(self._today()))

    def refresh_matches(self) -> list[Match]:
        """Re-run the last match query, or today's if there was none."""
        if self.last_match_range is None:
            return self.show_today()
        return self.show_matches(self.last_match_range)

    def close(self) -> None:
        self._search_debouncer.cancel()
