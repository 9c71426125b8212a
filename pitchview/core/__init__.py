"""Core types."""

from pitchview.core.types import Competition, DateRange, Match, Player, Score, Team

__all__ = [
    "Competition",
    "DateRange",
    "Match",
    "Player",
    "Score",
    "Team",
]
