"""Test doubles: a fake clock and a scriptable fake upstream."""

import httpx


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUpstream:
    """httpx transport serving canned JSON by path.

    Routes map a path (without the /api or /v4 prefix) to either a JSON
    payload or a callable taking the request and returning an httpx.Response.
    """

    def __init__(self, routes: dict | None = None, strip_prefix: str = "/api"):
        self.routes: dict[str, object] = dict(routes or {})
        self.strip_prefix = strip_prefix
        self.requests: list[httpx.Request] = []

    def paths(self) -> list[str]:
        return [self._path(r) for r in self.requests]

    def count(self, path: str) -> int:
        return self.paths().count(path)

    def _path(self, request: httpx.Request) -> str:
        path = request.url.path
        if path.startswith(self.strip_prefix):
            path = path[len(self.strip_prefix) :]
        return path

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(self._path(request))
        if route is None:
            return httpx.Response(404, json={"message": "not found"})
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def squad_payload(team_id: int, name: str, players: list[tuple[str, str]]) -> dict:
    return {
        "id": team_id,
        "name": name,
        "crest": f"https://crests.example/{team_id}.png",
        "squad": [
            {"id": team_id * 100 + i, "name": player, "position": position}
            for i, (player, position) in enumerate(players)
        ],
    }


LEAGUE_DATA: dict[str, object] = {
    "/competitions": {
        "competitions": [
            {"id": 1, "name": "League A", "code": "LA", "emblem": "https://emblems.example/1.png"},
            {"id": 2, "name": "League B", "code": "LB", "emblem": None},
        ]
    },
    "/competitions/1/teams": {
        "teams": [
            {"id": 10, "name": "Lisbon FC", "shortName": "Lisbon", "tla": "LIS"},
            {"id": 11, "name": "Porto Athletic", "shortName": "Porto", "tla": "POR"},
        ]
    },
    "/competitions/2/teams": {
        "teams": [{"id": 20, "name": "Madrid Club", "shortName": "Madrid", "tla": "MAD"}]
    },
    "/teams/10": squad_payload(
        10,
        "Lisbon FC",
        [
            ("Cristiano Ronaldo", "Forward"),
            ("Ronaldo Silva", "Defender"),
            ("Joao Costa", "Goalkeeper"),
        ],
    ),
    "/teams/11": squad_payload(11, "Porto Athletic", [("Ronaldo Pereira", "Midfield")]),
    "/teams/20": squad_payload(20, "Madrid Club", [("Carlos Ruiz", "Forward")]),
}


