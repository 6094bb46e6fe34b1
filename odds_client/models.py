import typing as t

import msgspec

T = t.TypeVar("T")

MarketCategory = t.Literal["featured", "additional", "game_period", "player_props"]
DateFormat = t.Literal["iso", "unix"]
OddsFormat = t.Literal["decimal", "american"]

FEATURED_MARKETS: frozenset[str] = frozenset(
    {"h2h", "spreads", "totals", "outrights", "h2h_lay", "outrights_lay"}
)
"""Markets served by the bulk `/odds` endpoint. Everything else needs event odds."""


class Region(msgspec.Struct, frozen=True):
    key: str
    """us"""
    description: str
    """United States"""


class Bookmaker(msgspec.Struct, frozen=True):
    region_key: str
    """us"""
    bookmaker_key: str
    """williamhill_us"""
    bookmaker_name: str
    """Caesars"""
    notes: str = ""


class Market(msgspec.Struct, frozen=True):
    category: str
    """featured"""
    sport_group: str
    """All"""
    market_key: str
    """h2h"""
    market_name: str
    """Head to head / Moneyline"""
    description: str = ""
    notes: str = ""


class QuotaHeaders(msgspec.Struct, frozen=True):
    """Usage snapshot read from the `x-requests-*` response headers."""

    requests_used: int
    requests_remaining: int
    requests_last: str


class CacheEntry(msgspec.Struct, t.Generic[T], frozen=True):
    data: T
    expires_at: float
    quota: QuotaHeaders


class APIResponse(msgspec.Struct, t.Generic[T], frozen=True):
    """Decoded payload plus the quota snapshot and estimated cost of the call."""

    data: T
    quota: QuotaHeaders
    estimated_cost: int


class MigrationAlias(msgspec.Struct, frozen=True):
    old: str
    new: str


class MigrationReport(msgspec.Struct):
    total_keys: int
    migrated_keys: int = 0
    unknown_keys: list[str] = msgspec.field(default_factory=list)
    aliases_used: list[MigrationAlias] = msgspec.field(default_factory=list)


# Provider responses


class Sport(msgspec.Struct, frozen=True):
    key: str
    """americanfootball_nfl"""
    group: str
    """American Football"""
    title: str
    """NFL"""
    description: str
    """US Football"""
    active: bool
    has_outrights: bool


class Outcome(msgspec.Struct, frozen=True):
    name: str
    price: float
    point: float | None = None
    description: str | None = None
    sid: str | None = None
    link: str | None = None
    bet_limit: float | None = None
    multiplier: float | None = None


class MarketOdds(msgspec.Struct, frozen=True):
    key: str
    last_update: str | None = None
    outcomes: list[Outcome] = msgspec.field(default_factory=list)
    link: str | None = None
    sid: str | None = None


class BookmakerOdds(msgspec.Struct, frozen=True):
    key: str
    title: str
    last_update: str | None = None
    markets: list[MarketOdds] = msgspec.field(default_factory=list)
    link: str | None = None
    sid: str | None = None


class Score(msgspec.Struct, frozen=True):
    name: str
    score: str | None = None


class Event(msgspec.Struct, frozen=True):
    id: str
    """32 character event id"""
    sport_key: str
    commence_time: str | int
    """ISO 8601 or unix seconds, depending on dateFormat"""
    sport_title: str | None = None
    home_team: str | None = None
    away_team: str | None = None
    bookmakers: list[BookmakerOdds] = msgspec.field(default_factory=list)
    completed: bool | None = None
    scores: list[Score] | None = None
    last_update: str | int | None = None


class Participant(msgspec.Struct, frozen=True):
    id: str
    """par_01hqmkq6fceknv7cg2v2vy9dcv"""
    full_name: str


class EventMarket(msgspec.Struct, frozen=True):
    key: str
    last_update: str | None = None


class BookmakerMarkets(msgspec.Struct, frozen=True):
    key: str
    title: str | None = None
    markets: list[EventMarket] = msgspec.field(default_factory=list)


class EventMarkets(msgspec.Struct, frozen=True):
    id: str | None = None
    sport_key: str | None = None
    commence_time: str | int | None = None
    home_team: str | None = None
    away_team: str | None = None
    bookmakers: list[BookmakerMarkets] = msgspec.field(default_factory=list)
    markets: list[EventMarket] = msgspec.field(default_factory=list)

    def market_keys(self) -> list[str]:
        """Distinct market keys across the event and all its bookmakers, first seen first."""
        keys = dict.fromkeys(m.key for m in self.markets)
        for bookmaker in self.bookmakers:
            keys.update(dict.fromkeys(m.key for m in bookmaker.markets))
        return list(keys)


class HistoricalSnapshot(msgspec.Struct, t.Generic[T], frozen=True):
    data: T
    timestamp: str | None = None
    previous_timestamp: str | None = None
    next_timestamp: str | None = None
