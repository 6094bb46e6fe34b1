"""Canonical regions, bookmakers and markets.

The tables ship as CSV files in `reference_data/`. They are the single source
of truth for which keys the provider accepts.
"""

import csv
import functools
import pathlib

from odds_client.models import Bookmaker, Market, Region

REFERENCE_DATA_DIR = pathlib.Path(__file__).parent / "reference_data"

SPORT_GROUP_SENTINELS = ("All", "Exchanges")


@functools.cache
def _bundled_text(name: str) -> str:
    with open(REFERENCE_DATA_DIR / name, encoding="utf-8") as f:
        return f.read()


def _clean(field: str) -> str:
    field = field.strip()
    if len(field) >= 2 and field[0] == field[-1] == '"':
        field = field[1:-1]
    elif field.startswith('"') or field.endswith('"'):
        field = field.strip('"')
    return field.strip()


def parse_delimited(text: str) -> list[dict[str, str]]:
    """Header row + data rows. Missing trailing fields come back as "".

    Each line is parsed on its own, so an unbalanced quote only damages its row.
    """
    lines = [line for line in text.strip().splitlines() if line.strip()]
    if not lines:
        return []

    headers = [_clean(h) for h in next(csv.reader([lines[0]]), [])]
    rows: list[dict[str, str]] = []
    for line in lines[1:]:
        values = [_clean(v) for v in next(csv.reader([line]), [])]
        rows.append(
            {header: values[i] if i < len(values) else "" for i, header in enumerate(headers)}
        )
    return rows


def load_regions(source: str | None = None) -> list[Region]:
    rows = parse_delimited(source if source is not None else _bundled_text("regions.csv"))
    return [
        Region(key=row.get("key", ""), description=row.get("description", ""))
        for row in rows
    ]


def load_bookmakers(source: str | None = None) -> list[Bookmaker]:
    rows = parse_delimited(source if source is not None else _bundled_text("bookmakers.csv"))
    return [
        Bookmaker(
            region_key=row.get("region_key", ""),
            bookmaker_key=row.get("bookmaker_key", ""),
            bookmaker_name=row.get("bookmaker_name", ""),
            notes=row.get("notes", ""),
        )
        for row in rows
    ]


def load_markets(source: str | None = None) -> list[Market]:
    rows = parse_delimited(source if source is not None else _bundled_text("markets.csv"))
    return [
        Market(
            category=row.get("category", ""),
            sport_group=row.get("sport_group", ""),
            market_key=row.get("market_key", ""),
            market_name=row.get("market_name", ""),
            description=row.get("description", ""),
            notes=row.get("notes", ""),
        )
        for row in rows
    ]


REGIONS: tuple[Region, ...] = tuple(load_regions())
BOOKMAKERS: tuple[Bookmaker, ...] = tuple(load_bookmakers())
MARKETS: tuple[Market, ...] = tuple(load_markets())

_REGIONS_BY_KEY = {r.key: r for r in REGIONS}
_BOOKMAKERS_BY_KEY = {b.bookmaker_key: b for b in BOOKMAKERS}
_MARKETS_BY_KEY = {m.market_key: m for m in MARKETS}

REGION_KEYS: frozenset[str] = frozenset(_REGIONS_BY_KEY)
BOOKMAKER_KEYS: frozenset[str] = frozenset(_BOOKMAKERS_BY_KEY)
MARKET_KEYS: frozenset[str] = frozenset(_MARKETS_BY_KEY)


def get_bookmakers_by_region(region: str) -> list[Bookmaker]:
    return [b for b in BOOKMAKERS if b.region_key == region]


def get_markets_by_category(category: str) -> list[Market]:
    return [m for m in MARKETS if m.category == category]


def get_markets_by_sport_group(sport_group: str) -> list[Market]:
    """Markets for `sport_group` plus the ones offered everywhere ("All", "Exchanges")."""
    return [
        m
        for m in MARKETS
        if m.sport_group == sport_group or m.sport_group in SPORT_GROUP_SENTINELS
    ]


def get_featured_markets() -> list[Market]:
    return get_markets_by_category("featured")


def get_player_prop_markets() -> list[Market]:
    return get_markets_by_category("player_props")


def get_game_period_markets() -> list[Market]:
    return get_markets_by_category("game_period")


def is_valid_market_key(key: str) -> bool:
    return key in MARKET_KEYS


def is_valid_region_key(key: str) -> bool:
    return key in REGION_KEYS


def is_valid_bookmaker_key(key: str) -> bool:
    return key in BOOKMAKER_KEYS


def get_market_display_name(key: str) -> str:
    market = _MARKETS_BY_KEY.get(key)
    return market.market_name if market and market.market_name else key


def get_bookmaker_display_name(key: str) -> str:
    bookmaker = _BOOKMAKERS_BY_KEY.get(key)
    return bookmaker.bookmaker_name if bookmaker and bookmaker.bookmaker_name else key


def get_region_display_name(key: str) -> str:
    region = _REGIONS_BY_KEY.get(key)
    return region.description if region and region.description else key
