"""Plain-text rendering of viewer state."""

from pitchview.client.session import NO_MATCHES_MESSAGE, NO_PLAYERS_MESSAGE, BrowserSession
from pitchview.core import Competition, Match, Player, Team


def render_player(player: Player) -> str:
    return f"{player.name} - Team: {player.team_name} - Position: {player.position or 'Unknown'}"


def render_players(players: list[Player]) -> str:
    if not players:
        return NO_PLAYERS_MESSAGE
    return "\n".join(render_player(p) for p in players)


def render_squad(players: list[Player]) -> str:
    return "\n".join(f"{p.name} – {p.position or 'Unknown'}" for p in players)


def render_options(items: list[Competition] | list[Team]) -> str:
    """One `id: name` line per competition or team, as listed in a selector."""
    return "\n".join(f"{item.id}: {item.name}" for item in items)


def render_match(match: Match) -> str:
    kickoff = match.kickoff.strftime("%Y-%m-%d %H:%M")
    if match.score.is_known:
        result = f"{match.score.home} - {match.score.away}"
    else:
        result = "vs"
    competition = f" [{match.competition.name}]" if match.competition else ""
    return f"{kickoff}  {match.home_team.name} {result} {match.away_team.name}{competition}"


def render_matches(matches: list[Match]) -> str:
    if not matches:
        return NO_MATCHES_MESSAGE
    return "\n".join(render_match(m) for m in matches)


def render_session(session: BrowserSession) -> str:
    """The results panel for the current session."""
    if session.players:
        return render_players(session.players)
    return session.message or NO_PLAYERS_MESSAGE
