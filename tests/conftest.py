import typing as t

import httpx
import msgspec.json
import pytest

from odds_client import client as client_module
from odds_client.client import OddsAPIClient

API_KEY = "test-key"

EVENT = {
    "id": "e912304de2b2ce35b473ce2ecd3d1502",
    "sport_key": "basketball_nba",
    "sport_title": "NBA",
    "commence_time": "2026-10-21T23:30:00Z",
    "home_team": "Boston Celtics",
    "away_team": "New York Knicks",
    "bookmakers": [
        {
            "key": "draftkings",
            "title": "DraftKings",
            "last_update": "2026-10-21T20:00:00Z",
            "markets": [
                {
                    "key": "h2h",
                    "last_update": "2026-10-21T20:00:00Z",
                    "outcomes": [
                        {"name": "Boston Celtics", "price": -180},
                        {"name": "New York Knicks", "price": 150},
                    ],
                },
                {
                    "key": "spreads",
                    "last_update": "2026-10-21T20:00:00Z",
                    "outcomes": [
                        {"name": "Boston Celtics", "price": -110, "point": -4.5},
                        {"name": "New York Knicks", "price": -110, "point": 4.5},
                    ],
                },
            ],
        }
    ],
}

SPORT = {
    "key": "basketball_nba",
    "group": "Basketball",
    "title": "NBA",
    "description": "US Basketball",
    "active": True,
    "has_outrights": False,
}

EVENT_MARKETS = {
    "id": EVENT["id"],
    "sport_key": "basketball_nba",
    "commence_time": "2026-10-21T23:30:00Z",
    "home_team": "Boston Celtics",
    "away_team": "New York Knicks",
    "bookmakers": [
        {
            "key": "draftkings",
            "title": "DraftKings",
            "markets": [{"key": "player_points"}, {"key": "h2h"}],
        },
        {
            "key": "fanduel",
            "title": "FanDuel",
            "markets": [{"key": "h2h"}, {"key": "player_assists"}],
        },
    ],
}

PARTICIPANTS = [
    {"id": "par_01hqmkq6fceknv7cg2v2vy9dcv", "full_name": "Boston Celtics"},
    {"id": "par_01hqmkq6fdf2ft7nzy1q1w5b1m", "full_name": "New York Knicks"},
]


def payload_for(path: str) -> t.Any:
    """Canned provider payload for an endpoint path."""
    historical = path.startswith("/v4/historical")
    if path == "/v4/sports":
        body: t.Any = [SPORT]
    elif path.endswith("/markets"):
        body = EVENT_MARKETS
    elif path.endswith("/participants"):
        body = PARTICIPANTS
    elif "/events/" in path:
        body = EVENT
    else:
        body = [EVENT]

    if historical:
        return {
            "timestamp": "2026-10-01T12:00:00Z",
            "previous_timestamp": "2026-10-01T11:55:00Z",
            "next_timestamp": "2026-10-01T12:05:00Z",
            "data": body,
        }
    return body


class FakeClock:
    """Monotonic clock that only moves when something sleeps or a test advances it."""

    def __init__(self, now: float = 1000.0):
        self.now = now
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeProvider:
    """Records every request and answers with `responder`, or the canned payload."""

    def __init__(
        self,
        clock: FakeClock,
        responder: t.Callable[[httpx.Request], httpx.Response] | None = None,
    ):
        self.clock = clock
        self.responder = responder
        self.requests: list[httpx.Request] = []
        self.started_at: list[float] = []
        self.headers = {
            "x-requests-used": "42",
            "x-requests-remaining": "458",
            "x-requests-last": "2026-10-19T09:00:00Z",
        }

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.started_at.append(self.clock())
        if self.responder is not None:
            return self.responder(request)
        return httpx.Response(
            200,
            content=msgspec.json.encode(payload_for(request.url.path)),
            headers=self.headers,
        )


def error_response(status: int, code: str | None, message: str = "error") -> httpx.Response:
    body: dict[str, t.Any] = {"message": message}
    if code is not None:
        body["code"] = code
    return httpx.Response(
        status,
        content=msgspec.json.encode(body),
        headers={"x-requests-used": "10", "x-requests-remaining": "490"},
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def provider(clock: FakeClock) -> FakeProvider:
    return FakeProvider(clock)


@pytest.fixture
def make_client(clock: FakeClock):
    def _make(provider: FakeProvider, **kwargs: t.Any) -> OddsAPIClient:
        return OddsAPIClient(
            API_KEY,
            transport=httpx.MockTransport(provider),
            clock=clock,
            sleep=clock.sleep,
            **kwargs,
        )

    return _make


@pytest.fixture(autouse=True)
def _reset_shared_client():
    client_module.reset_odds_api_client()
    yield
    client_module.reset_odds_api_client()
