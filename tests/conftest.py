"""Shared fixtures."""

from collections.abc import Callable

import pytest

from pitchview.client import ApiFetcher, FootballDataService, RetryPolicy
from tests.fakes import LEAGUE_DATA, FakeClock, FakeUpstream


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream(LEAGUE_DATA)


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def make_fetcher(upstream, sleeps) -> Callable[..., ApiFetcher]:
    def _make(**kwargs) -> ApiFetcher:
        kwargs.setdefault("transport", upstream.transport)
        kwargs.setdefault("sleep", sleeps.append)
        kwargs.setdefault("policy", RetryPolicy())
        return ApiFetcher("http://localhost:3000/api", **kwargs)

    return _make


@pytest.fixture
def service(make_fetcher, clock) -> FootballDataService:
    return FootballDataService(make_fetcher(), clock=clock)
