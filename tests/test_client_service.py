"""Tests for decoding, filtering and the per-team caches of the data service."""

import threading
from datetime import UTC, date, datetime

import httpx
import pytest

from pitchview.client import DecodeError, FootballDataService, KeyedCache, filter_players
from pitchview.client.decoders import decode_competitions, decode_matches, decode_team_detail
from pitchview.core import DateRange, Player

# ---------- decoding ----------


class TestDecoders:
    def test_competitions(self):
        competitions = decode_competitions(
            {"competitions": [{"id": 2021, "name": "Premier League", "emblem": "https://e/pl.png"}]}
        )
        assert competitions[0].id == 2021
        assert competitions[0].name == "Premier League"
        assert competitions[0].logo_url == "https://e/pl.png"

    def test_missing_list_key_is_an_error(self):
        with pytest.raises(DecodeError):
            decode_competitions({"teams": []})

    def test_team_without_squad_has_empty_squad(self):
        detail = decode_team_detail({"id": 7, "name": "Youth XI"})
        assert detail.team.name == "Youth XI"
        assert detail.squad == []

    def test_matches_with_and_without_score(self):
        matches = decode_matches(
            {
                "matches": [
                    {
                        "id": 1,
                        "utcDate": "2024-05-11T14:00:00Z",
                        "status": "FINISHED",
                        "competition": {"id": 2021, "name": "Premier League"},
                        "homeTeam": {"id": 57, "name": "Arsenal FC"},
                        "awayTeam": {"id": 61, "name": "Chelsea FC"},
                        "score": {"fullTime": {"home": 2, "away": 1}},
                    },
                    {
                        "id": 2,
                        "utcDate": "2024-05-12T16:30:00Z",
                        "homeTeam": {"id": 64, "name": "Liverpool FC"},
                        "awayTeam": {"id": 65, "name": "Manchester City FC"},
                        "score": {"fullTime": {"home": None, "away": None}},
                    },
                ]
            }
        )
        finished, scheduled = matches
        assert finished.kickoff == datetime(2024, 5, 11, 14, 0, tzinfo=UTC)
        assert finished.score.is_known and (finished.score.home, finished.score.away) == (2, 1)
        assert finished.competition.name == "Premier League"
        assert not scheduled.score.is_known
        assert scheduled.status == "SCHEDULED"


# ---------- filtering ----------


class TestFilterPlayers:
    SQUAD = [
        Player(name="Cristiano Ronaldo", position="Forward", team_name="Lisbon FC"),
        Player(name="Ronaldo Silva", position="Defender", team_name="Lisbon FC"),
        Player(name="Joao Costa", position="Goalkeeper", team_name="Lisbon FC"),
    ]

    def test_search_matches_both_ronaldos(self):
        names = [p.name for p in filter_players(self.SQUAD, "ronaldo")]
        assert names == ["Cristiano Ronaldo", "Ronaldo Silva"]

    def test_search_and_position_combine(self):
        names = [p.name for p in filter_players(self.SQUAD, "ronaldo", "Forward")]
        assert names == ["Cristiano Ronaldo"]

    def test_position_ignores_case(self):
        assert [p.name for p in filter_players(self.SQUAD, "", "goalkeeper")] == ["Joao Costa"]

    def test_position_is_equality_not_substring(self):
        assert filter_players(self.SQUAD, "", "Forw") == []

    def test_search_matches_team_name(self):
        assert len(filter_players(self.SQUAD, "LISBON")) == 3

    def test_empty_filters_keep_everyone(self):
        assert filter_players(self.SQUAD) == self.SQUAD


# ---------- service caching ----------


class TestTeamsAndSquads:
    def test_squad_labelled_with_listed_team_name(self, service):
        service.load_teams(1)
        squad = service.get_squad(11)
        assert [(p.name, p.team_name) for p in squad] == [("Ronaldo Pereira", "Porto Athletic")]

    def test_squad_fetched_once_per_team(self, service, upstream):
        service.load_teams(1)
        service.get_squad(10)
        service.get_squad(10)
        service.search_players("silva", team_id=10)
        assert upstream.count("/teams/10") == 1

    def test_squad_refetched_after_ttl(self, service, upstream, clock):
        service.get_squad(10)
        clock.advance(10 * 60 + 1)
        service.get_squad(10)
        assert upstream.count("/teams/10") == 2

    def test_switching_competition_clears_teams_and_squads(self, service, upstream):
        service.load_teams(1)
        service.get_squad(10)
        assert len(service.squads) == 1

        teams = service.load_teams(2)

        assert [t.id for t in teams] == [20]
        assert service.team_by_id(10) is None
        assert service.squads.peek(10) is None
        assert len(service.squads) == 0

        # Lisbon's squad is fetched again, not served from the old cache
        service.get_squad(10)
        assert upstream.count("/teams/10") == 2

    def test_same_competition_reuses_team_list(self, service, upstream):
        service.load_teams(1)
        service.load_teams(1)
        assert upstream.count("/competitions/1/teams") == 1

    def test_search_across_all_teams(self, service, upstream):
        service.load_teams(1)

        players = service.search_players("ronaldo")

        names = sorted(p.name for p in players)
        assert names == ["Cristiano Ronaldo", "Ronaldo Pereira", "Ronaldo Silva"]
        assert upstream.count("/teams/10") == 1
        assert upstream.count("/teams/11") == 1

    def test_search_across_teams_skips_failing_team(self, service, upstream):
        upstream.routes["/teams/11"] = lambda request: httpx.Response(500, text="boom")
        service.load_teams(1)

        players = service.search_players("ronaldo", "Forward")

        assert [p.name for p in players] == ["Cristiano Ronaldo"]


class TestMatches:
    def test_matches_by_date_range_not_cached(self, service, upstream):
        upstream.routes["/matches"] = {"matches": []}
        day = DateRange.single(date(2024, 5, 11))

        service.get_matches(day)
        service.get_matches(day)

        assert upstream.count("/matches") == 2
        sent = upstream.requests[-1].url.params
        assert sent["dateFrom"] == sent["dateTo"] == "2024-05-11"

    def test_team_matches_cached_per_team(self, service, upstream):
        upstream.routes["/teams/10/matches"] = {"matches": []}

        service.get_team_matches(10)
        service.get_team_matches(10)

        assert upstream.count("/teams/10/matches") == 1


# ---------- in-flight deduplication ----------


class TestKeyedCache:
    def test_concurrent_requests_share_one_fetch(self):
        cache = KeyedCache("squad")
        started = threading.Event()
        release = threading.Event()
        calls = []

        def loader():
            calls.append(1)
            started.set()
            release.wait(timeout=5)
            return ["player"]

        results = []
        first = threading.Thread(target=lambda: results.append(cache.get_or_fetch(57, loader)))
        first.start()
        assert started.wait(timeout=5)

        second = threading.Thread(target=lambda: results.append(cache.get_or_fetch(57, loader)))
        second.start()
        release.set()
        first.join(timeout=5)
        second.join(timeout=5)

        assert results == [["player"], ["player"]]
        assert len(calls) == 1

    def test_failures_are_not_cached(self):
        cache = KeyedCache("squad")

        def failing():
            raise RuntimeError("upstream down")

        with pytest.raises(RuntimeError):
            cache.get_or_fetch(1, failing)
        assert cache.get_or_fetch(1, lambda: ["ok"]) == ["ok"]

    def test_fetch_finished_after_clear_is_not_stored(self):
        cache = KeyedCache("squad")

        def loader():
            cache.clear()
            return ["stale"]

        assert cache.get_or_fetch(1, loader) == ["stale"]
        assert cache.peek(1) is None

    def test_service_dedups_parallel_squad_requests(self, make_fetcher, upstream):
        gate = threading.Event()
        original = upstream.routes["/teams/10"]

        def slow(request):
            gate.wait(timeout=5)
            return httpx.Response(200, json=original)

        upstream.routes["/teams/10"] = slow
        service = FootballDataService(make_fetcher())

        threads = [threading.Thread(target=service.get_squad, args=(10,)) for _ in range(4)]
        for t in threads:
            t.start()
        gate.set()
        for t in threads:
            t.join(timeout=5)

        assert upstream.count("/teams/10") == 1
