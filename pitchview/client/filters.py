"""Player search and position filtering.

Both criteria are case-insensitive and combine with AND. An empty criterion
matches everything.
"""

from collections.abc import Iterable

from pitchview.core import Player


def _fold(text: str | None) -> str:
    return (text or "").strip().casefold()


def matches_search(player: Player, search: str) -> bool:
    """Substring match on player name or team name."""
    term = _fold(search)
    if not term:
        return True
    return term in _fold(player.name) or term in _fold(player.team_name)


def matches_position(player: Player, position: str) -> bool:
    """Exact position match, ignoring case and surrounding whitespace."""
    wanted = _fold(position)
    if not wanted:
        return True
    return _fold(player.position) == wanted


def filter_players(players: Iterable[Player], search: str = "", position: str = "") -> list[Player]:
    """Players matching both the free-text search and the position filter."""
    return [p for p in players if matches_search(p, search) and matches_position(p, position)]
