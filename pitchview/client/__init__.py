"""Client data layer for the viewer.

Talks to the proxy with retry, keeps per-team caches, and tracks the
selection state of a browsing session.

Usage:
    from pitchview.client import ApiFetcher, BrowserSession, FootballDataService

    service = FootballDataService(ApiFetcher("http://localhost:3000/api"))
    session = BrowserSession(service)
    session.select_competition(2021)
"""

from pitchview.client.debounce import Debouncer
from pitchview.client.decoders import TeamDetail
from pitchview.client.errors import ApiError, DecodeError, PitchviewClientError, UnsafeOriginError
from pitchview.client.fetcher import ApiFetcher, is_safe_origin
from pitchview.client.filters import filter_players
from pitchview.client.keyed_cache import KeyedCache
from pitchview.client.retry import RetryPolicy
from pitchview.client.service import FootballDataService
from pitchview.client.session import BrowserSession, SelectionState

__all__ = [
    # Fetching
    "ApiFetcher",
    "RetryPolicy",
    "is_safe_origin",
    # Errors
    "ApiError",
    "DecodeError",
    "PitchviewClientError",
    "UnsafeOriginError",
    # Data
    "FootballDataService",
    "KeyedCache",
    "TeamDetail",
    "filter_players",
    # Session
    "BrowserSession",
    "Debouncer",
    "SelectionState",
]
