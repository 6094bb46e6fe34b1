import logging

import pytest
from conftest import API_KEY, EVENT

from odds_client import client as client_module
from odds_client.async_caching_client import ODDS_API_BASE, ODDS_API_BASE_IPV6
from odds_client.client import (
    EVENT_MARKETS_TTL,
    EVENT_ODDS_TTL,
    EVENTS_TTL,
    ODDS_TTL,
    PARTICIPANTS_TTL,
    SCORES_TTL,
    SPORTS_TTL,
    OddsAPIClient,
    get_odds_api_client,
    player_prop_markets_for,
    reset_odds_api_client,
)
from odds_client.env import Env
from odds_client.models import Event, EventMarkets, HistoricalSnapshot

SPORT = "basketball_nba"
EVENT_ID = EVENT["id"]

CACHED_OPERATIONS = [
    (lambda c: c.get_sports(), "/v4/sports", SPORTS_TTL),
    (lambda c: c.get_odds(SPORT), f"/v4/sports/{SPORT}/odds", ODDS_TTL),
    (lambda c: c.get_scores(SPORT), f"/v4/sports/{SPORT}/scores", SCORES_TTL),
    (lambda c: c.get_events(SPORT), f"/v4/sports/{SPORT}/events", EVENTS_TTL),
    (
        lambda c: c.get_event_odds(SPORT, EVENT_ID),
        f"/v4/sports/{SPORT}/events/{EVENT_ID}/odds",
        EVENT_ODDS_TTL,
    ),
    (
        lambda c: c.get_event_markets(SPORT, EVENT_ID),
        f"/v4/sports/{SPORT}/events/{EVENT_ID}/markets",
        EVENT_MARKETS_TTL,
    ),
    (
        lambda c: c.get_participants(SPORT),
        f"/v4/sports/{SPORT}/participants",
        PARTICIPANTS_TTL,
    ),
]


def test_ttls():
    assert SPORTS_TTL == 21600
    assert ODDS_TTL == 60
    assert SCORES_TTL == 30
    assert EVENTS_TTL == 120
    assert EVENT_MARKETS_TTL == 300
    assert PARTICIPANTS_TTL == 86400


@pytest.mark.parametrize(("call", "path", "ttl"), CACHED_OPERATIONS)
@pytest.mark.asyncio
async def test_operation_is_cached_for_its_ttl(make_client, provider, clock, call, path, ttl):
    async with make_client(provider) as client:
        await call(client)
        assert provider.requests[0].url.path == path

        clock.advance(ttl)
        cached = await call(client)
        assert cached.estimated_cost == 0
        assert len(provider.requests) == 1

        clock.advance(1)
        await call(client)
        assert len(provider.requests) == 2


@pytest.mark.asyncio
async def test_get_odds_featured_markets(make_client, provider):
    async with make_client(provider) as client:
        res = await client.get_odds(SPORT, markets=["h2h", "spreads"])
        again = await client.get_odds(SPORT, markets=["h2h", "spreads"])

        assert client.cache.keys() == [
            f"/v4/sports/{SPORT}/odds?apiKey={API_KEY}&regions=us&markets=h2h%2Cspreads"
        ]

    assert res.estimated_cost == 2
    assert again.estimated_cost == 0
    assert isinstance(res.data[0], Event)
    assert res.data[0].bookmakers[0].markets[1].outcomes[0].point == -4.5
    assert len(provider.requests) == 1
    assert provider.requests[0].url.params.multi_items() == [
        ("apiKey", API_KEY),
        ("regions", "us"),
        ("markets", "h2h,spreads"),
    ]


@pytest.mark.asyncio
async def test_get_odds_optional_params(make_client, provider):
    async with make_client(provider) as client:
        res = await client.get_odds(
            SPORT,
            regions=["us", "uk"],
            markets=["h2h", "totals"],
            odds_format="decimal",
            include_links=True,
            commence_time_from="2026-10-20T00:00:00Z",
        )

    assert res.estimated_cost == 4
    assert provider.requests[0].url.params.multi_items() == [
        ("apiKey", API_KEY),
        ("regions", "us,uk"),
        ("markets", "h2h,totals"),
        ("oddsFormat", "decimal"),
        ("commenceTimeFrom", "2026-10-20T00:00:00Z"),
        ("includeLinks", "true"),
    ]


@pytest.mark.asyncio
async def test_get_odds_warns_about_non_featured_markets(make_client, provider, caplog):
    caplog.set_level(logging.WARNING, logger="odds_client")
    async with make_client(provider) as client:
        await client.get_odds(SPORT, markets=["h2h", "player_points"])

    assert "Non-featured markets detected: player_points" in caplog.text
    assert len(provider.requests) == 1


@pytest.mark.asyncio
async def test_featured_markets_do_not_warn(make_client, provider, caplog):
    caplog.set_level(logging.WARNING, logger="odds_client")
    async with make_client(provider) as client:
        await client.get_odds(SPORT, markets=["h2h", "spreads", "totals"])

    assert "Non-featured" not in caplog.text


@pytest.mark.asyncio
async def test_get_scores_params(make_client, provider):
    async with make_client(provider) as client:
        res = await client.get_scores(SPORT, days_from=3)

    assert res.estimated_cost == 1
    assert provider.requests[0].url.params["daysFrom"] == "3"


@pytest.mark.asyncio
async def test_get_event_odds_cost(make_client, provider):
    async with make_client(provider) as client:
        res = await client.get_event_odds(
            SPORT, EVENT_ID, regions=["us", "us2"], markets=["player_points", "player_assists"]
        )

    assert res.estimated_cost == 40
    assert res.data.id == EVENT_ID


@pytest.mark.asyncio
async def test_get_event_markets(make_client, provider):
    async with make_client(provider) as client:
        res = await client.get_event_markets(SPORT, EVENT_ID)

    assert isinstance(res.data, EventMarkets)
    assert res.estimated_cost == 1
    assert [b.key for b in res.data.bookmakers] == ["draftkings", "fanduel"]


@pytest.mark.asyncio
async def test_get_participants(make_client, provider):
    async with make_client(provider) as client:
        res = await client.get_participants(SPORT)

    assert res.estimated_cost == 1
    assert [p.full_name for p in res.data] == ["Boston Celtics", "New York Knicks"]


@pytest.mark.asyncio
async def test_free_operations(make_client, provider):
    async with make_client(provider) as client:
        sports = await client.get_sports()
        events = await client.get_events(SPORT)

    assert sports.estimated_cost == 0
    assert events.estimated_cost == 0
    assert sports.data[0].group == "Basketball"
    assert events.data[0].home_team == "Boston Celtics"


@pytest.mark.asyncio
async def test_historical_odds_are_never_cached(make_client, provider):
    async with make_client(provider) as client:
        first = await client.get_historical_odds(SPORT, "2026-10-01T12:00:00Z")
        second = await client.get_historical_odds(SPORT, "2026-10-01T12:00:00Z")

        assert len(client.cache) == 0

    assert len(provider.requests) == 2
    assert first.estimated_cost == second.estimated_cost == 10
    assert isinstance(first.data, HistoricalSnapshot)
    assert first.data.timestamp == "2026-10-01T12:00:00Z"
    assert first.data.next_timestamp == "2026-10-01T12:05:00Z"
    assert first.data.data[0].id == EVENT_ID
    assert provider.requests[0].url.path == f"/v4/historical/sports/{SPORT}/odds"
    assert provider.requests[0].url.params["date"] == "2026-10-01T12:00:00Z"


@pytest.mark.asyncio
async def test_historical_events_and_event_odds(make_client, provider):
    async with make_client(provider) as client:
        events = await client.get_historical_events(SPORT, "2026-10-01T12:00:00Z")
        odds = await client.get_historical_event_odds(
            SPORT, EVENT_ID, "2026-10-01T12:00:00Z", markets=["h2h", "totals"]
        )

    assert events.estimated_cost == 10
    assert events.data.data[0].id == EVENT_ID
    assert odds.estimated_cost == 20
    assert odds.data.data.id == EVENT_ID
    assert [r.url.path for r in provider.requests] == [
        f"/v4/historical/sports/{SPORT}/events",
        f"/v4/historical/sports/{SPORT}/events/{EVENT_ID}/odds",
    ]


@pytest.mark.asyncio
async def test_get_player_props(make_client, provider):
    async with make_client(provider) as client:
        res = await client.get_player_props(SPORT, EVENT_ID)

    assert res.estimated_cost == 40
    assert provider.requests[0].url.path == f"/v4/sports/{SPORT}/events/{EVENT_ID}/odds"
    assert provider.requests[0].url.params.multi_items() == [
        ("apiKey", API_KEY),
        ("regions", "us"),
        ("markets", "player_points,player_assists,player_rebounds,player_threes"),
        ("dateFormat", "iso"),
        ("oddsFormat", "american"),
    ]


@pytest.mark.asyncio
async def test_get_player_props_unknown_sport(make_client, provider):
    async with make_client(provider) as client:
        with pytest.raises(ValueError):
            await client.get_player_props("cricket_ipl", EVENT_ID)

    assert provider.requests == []


@pytest.mark.parametrize(
    ("sport", "expected"),
    [
        ("americanfootball_nfl", "player_pass_yds"),
        ("basketball_wnba", "player_points"),
        ("baseball_mlb", "batter_hits"),
        ("icehockey_nhl", "player_goals"),
    ],
)
def test_player_prop_markets_for(sport, expected):
    assert expected in player_prop_markets_for(sport)


def test_player_prop_markets_for_unknown_sport():
    assert player_prop_markets_for("cricket_ipl") == ()


@pytest.mark.asyncio
async def test_discover_event_markets(make_client, provider):
    async with make_client(provider) as client:
        res = await client.discover_event_markets(SPORT, EVENT_ID)
        again = await client.discover_event_markets(SPORT, EVENT_ID)

    assert res.data == ["player_points", "h2h", "player_assists"]
    assert res.estimated_cost == 1
    assert again.data == res.data
    assert again.estimated_cost == 0
    assert len(provider.requests) == 1


def test_shared_client_requires_a_key(monkeypatch):
    monkeypatch.setattr(Env, "ODDS_API_KEY", None)

    with pytest.raises(RuntimeError, match="ODDS_API_KEY not configured"):
        get_odds_api_client()


def test_shared_client_is_reused_until_reset(monkeypatch):
    monkeypatch.setattr(Env, "ODDS_API_KEY", "from-env")

    first = get_odds_api_client()
    assert isinstance(first, OddsAPIClient)
    assert get_odds_api_client() is first
    assert get_odds_api_client("another-key") is first

    reset_odds_api_client()
    assert client_module._client_instance is None
    assert get_odds_api_client() is not first


def test_shared_client_explicit_key(monkeypatch):
    monkeypatch.setattr(Env, "ODDS_API_KEY", None)

    shared = get_odds_api_client("explicit")

    assert shared._api_key == "explicit"


@pytest.mark.parametrize(("use_ipv6", "base"), [(False, ODDS_API_BASE), (True, ODDS_API_BASE_IPV6)])
def test_shared_client_host(monkeypatch, use_ipv6, base):
    monkeypatch.setattr(Env, "ODDS_API_KEY", "from-env")
    monkeypatch.setattr(Env, "ODDS_API_USE_IPV6", use_ipv6)

    shared = get_odds_api_client()

    assert str(shared._client.base_url).rstrip("/") == base
