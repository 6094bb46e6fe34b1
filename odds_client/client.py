"""The Odds API v4 operations.

Each method is a thin wrapper around `AsyncCachingClient.get` that fixes the
endpoint, the response type and how long a successful response may be reused.

    async with OddsAPIClient(api_key) as client:
        res = await client.get_odds("basketball_nba", markets=["h2h", "spreads"])
        print(res.estimated_cost, res.quota.requests_remaining)
"""

import typing as t

from odds_client.async_caching_client import AsyncCachingClient
from odds_client.env import Env
from odds_client.logger import logger
from odds_client.migration import is_featured_market
from odds_client.models import (
    APIResponse,
    DateFormat,
    Event,
    EventMarkets,
    HistoricalSnapshot,
    OddsFormat,
    Participant,
    Sport,
)

SPORTS_TTL = 6 * 60 * 60
ODDS_TTL = 60
SCORES_TTL = 30
EVENTS_TTL = 120
EVENT_ODDS_TTL = 60
EVENT_MARKETS_TTL = 5 * 60
PARTICIPANTS_TTL = 24 * 60 * 60

DEFAULT_REGIONS: tuple[str, ...] = ("us",)
DEFAULT_MARKETS: tuple[str, ...] = ("h2h",)

PLAYER_PROP_MARKETS_BY_SPORT: dict[str, tuple[str, ...]] = {
    "football": ("player_pass_yds", "player_pass_tds", "player_rush_yds", "player_receive_yds"),
    "basketball": ("player_points", "player_assists", "player_rebounds", "player_threes"),
    "baseball": ("batter_hits", "batter_home_runs", "pitcher_strikeouts"),
    "hockey": ("player_points", "player_goals", "player_assists"),
}


def player_prop_markets_for(sport: str) -> tuple[str, ...]:
    """Standard prop markets for a sport key, matched on its family ("basketball_nba" -> basketball)."""
    for family, markets in PLAYER_PROP_MARKETS_BY_SPORT.items():
        if family in sport:
            return markets
    return ()


class OddsAPIClient(AsyncCachingClient):
    __slots__ = ()

    async def get_sports(self) -> APIResponse[list[Sport]]:
        """In-season sports. Free."""
        return await self.get("/v4/sports", ty=list[Sport], cache_ttl=SPORTS_TTL)

    async def get_odds(
        self,
        sport: str,
        *,
        regions: t.Sequence[str] = DEFAULT_REGIONS,
        markets: t.Sequence[str] = DEFAULT_MARKETS,
        bookmakers: t.Sequence[str] | None = None,
        date_format: DateFormat | None = None,
        odds_format: OddsFormat | None = None,
        event_ids: t.Sequence[str] | None = None,
        commence_time_from: str | None = None,
        commence_time_to: str | None = None,
        include_links: bool | None = None,
        include_sids: bool | None = None,
        include_bet_limits: bool | None = None,
    ) -> APIResponse[list[Event]]:
        """Featured markets for every upcoming event. Costs markets x regions."""
        non_featured = [m for m in markets if not is_featured_market(m)]
        if non_featured:
            logger.warning(
                f"[odds_api] Non-featured markets detected: {', '.join(non_featured)}. "
                "Use get_event_odds() instead."
            )

        return await self.get(
            f"/v4/sports/{sport}/odds",
            ty=list[Event],
            params={
                "regions": regions,
                "markets": markets,
                "bookmakers": bookmakers,
                "dateFormat": date_format,
                "oddsFormat": odds_format,
                "eventIds": event_ids,
                "commenceTimeFrom": commence_time_from,
                "commenceTimeTo": commence_time_to,
                "includeLinks": include_links,
                "includeSids": include_sids,
                "includeBetLimits": include_bet_limits,
            },
            cache_ttl=ODDS_TTL,
        )

    async def get_scores(
        self,
        sport: str,
        *,
        days_from: int | None = None,
        date_format: DateFormat | None = None,
        event_ids: t.Sequence[str] | None = None,
    ) -> APIResponse[list[Event]]:
        return await self.get(
            f"/v4/sports/{sport}/scores",
            ty=list[Event],
            params={
                "daysFrom": days_from,
                "dateFormat": date_format,
                "eventIds": event_ids,
            },
            cache_ttl=SCORES_TTL,
        )

    async def get_events(
        self,
        sport: str,
        *,
        date_format: DateFormat | None = None,
        event_ids: t.Sequence[str] | None = None,
        commence_time_from: str | None = None,
        commence_time_to: str | None = None,
    ) -> APIResponse[list[Event]]:
        """Upcoming and live events without odds. Free."""
        return await self.get(
            f"/v4/sports/{sport}/events",
            ty=list[Event],
            params={
                "dateFormat": date_format,
                "eventIds": event_ids,
                "commenceTimeFrom": commence_time_from,
                "commenceTimeTo": commence_time_to,
            },
            cache_ttl=EVENTS_TTL,
        )

    async def get_event_odds(
        self,
        sport: str,
        event_id: str,
        *,
        regions: t.Sequence[str] = DEFAULT_REGIONS,
        markets: t.Sequence[str] | None = None,
        bookmakers: t.Sequence[str] | None = None,
        date_format: DateFormat | None = None,
        odds_format: OddsFormat | None = None,
        include_links: bool | None = None,
        include_sids: bool | None = None,
        include_bet_limits: bool | None = None,
    ) -> APIResponse[Event]:
        """Any market type for one event, player props included. Costs 10 x markets x regions."""
        return await self.get(
            f"/v4/sports/{sport}/events/{event_id}/odds",
            ty=Event,
            params={
                "regions": regions,
                "markets": markets,
                "bookmakers": bookmakers,
                "dateFormat": date_format,
                "oddsFormat": odds_format,
                "includeLinks": include_links,
                "includeSids": include_sids,
                "includeBetLimits": include_bet_limits,
            },
            cache_ttl=EVENT_ODDS_TTL,
        )

    async def get_event_markets(
        self,
        sport: str,
        event_id: str,
        *,
        regions: t.Sequence[str] = DEFAULT_REGIONS,
        bookmakers: t.Sequence[str] | None = None,
        date_format: DateFormat | None = None,
        include_links: bool | None = None,
        include_sids: bool | None = None,
    ) -> APIResponse[EventMarkets]:
        return await self.get(
            f"/v4/sports/{sport}/events/{event_id}/markets",
            ty=EventMarkets,
            params={
                "regions": regions,
                "bookmakers": bookmakers,
                "dateFormat": date_format,
                "includeLinks": include_links,
                "includeSids": include_sids,
            },
            cache_ttl=EVENT_MARKETS_TTL,
        )

    async def get_participants(self, sport: str) -> APIResponse[list[Participant]]:
        return await self.get(
            f"/v4/sports/{sport}/participants",
            ty=list[Participant],
            cache_ttl=PARTICIPANTS_TTL,
        )

    # Historical endpoints are paid-plan only and never cached.

    async def get_historical_odds(
        self,
        sport: str,
        date: str,
        *,
        regions: t.Sequence[str] = DEFAULT_REGIONS,
        markets: t.Sequence[str] = DEFAULT_MARKETS,
        bookmakers: t.Sequence[str] | None = None,
        date_format: DateFormat | None = None,
        odds_format: OddsFormat | None = None,
    ) -> APIResponse[HistoricalSnapshot[list[Event]]]:
        return await self.get(
            f"/v4/historical/sports/{sport}/odds",
            ty=HistoricalSnapshot[list[Event]],
            params={
                "regions": regions,
                "markets": markets,
                "date": date,
                "bookmakers": bookmakers,
                "dateFormat": date_format,
                "oddsFormat": odds_format,
            },
        )

    async def get_historical_events(
        self,
        sport: str,
        date: str,
        *,
        date_format: DateFormat | None = None,
        event_ids: t.Sequence[str] | None = None,
    ) -> APIResponse[HistoricalSnapshot[list[Event]]]:
        return await self.get(
            f"/v4/historical/sports/{sport}/events",
            ty=HistoricalSnapshot[list[Event]],
            params={
                "date": date,
                "dateFormat": date_format,
                "eventIds": event_ids,
            },
        )

    async def get_historical_event_odds(
        self,
        sport: str,
        event_id: str,
        date: str,
        *,
        regions: t.Sequence[str] = DEFAULT_REGIONS,
        markets: t.Sequence[str] | None = None,
        bookmakers: t.Sequence[str] | None = None,
        date_format: DateFormat | None = None,
        odds_format: OddsFormat | None = None,
    ) -> APIResponse[HistoricalSnapshot[Event]]:
        return await self.get(
            f"/v4/historical/sports/{sport}/events/{event_id}/odds",
            ty=HistoricalSnapshot[Event],
            params={
                "regions": regions,
                "markets": markets,
                "date": date,
                "bookmakers": bookmakers,
                "dateFormat": date_format,
                "oddsFormat": odds_format,
            },
        )

    async def get_player_props(
        self,
        sport: str,
        event_id: str,
        *,
        regions: t.Sequence[str] = DEFAULT_REGIONS,
        odds_format: OddsFormat = "american",
    ) -> APIResponse[Event]:
        markets = player_prop_markets_for(sport)
        if not markets:
            raise ValueError(f"No player prop markets known for sport: {sport}")
        return await self.get_event_odds(
            sport,
            event_id,
            regions=regions,
            markets=markets,
            odds_format=odds_format,
            date_format="iso",
        )

    async def discover_event_markets(
        self,
        sport: str,
        event_id: str,
        *,
        regions: t.Sequence[str] = DEFAULT_REGIONS,
    ) -> APIResponse[list[str]]:
        """Market keys on offer for an event. Check these before paying for event odds."""
        res = await self.get_event_markets(sport, event_id, regions=regions)
        return APIResponse(
            data=res.data.market_keys(), quota=res.quota, estimated_cost=res.estimated_cost
        )


_client_instance: OddsAPIClient | None = None


def get_odds_api_client(api_key: str | None = None) -> OddsAPIClient:
    """Shared client so every caller goes through the same rate limiter and cache.

    Entry points should prefer constructing an `OddsAPIClient` themselves and
    passing it down.
    """
    global _client_instance
    if _client_instance is None:
        key = api_key or Env.ODDS_API_KEY
        if not key:
            raise RuntimeError("ODDS_API_KEY not configured")
        _client_instance = OddsAPIClient(
            key, use_ipv6=Env.ODDS_API_USE_IPV6, timeout=Env.ODDS_API_TIMEOUT
        )
    return _client_instance


def reset_odds_api_client() -> None:
    global _client_instance
    _client_instance = None
