"""Maps legacy market and bookmaker identifiers onto canonical keys.

Provider keys get renamed over time (a bookmaker rebrands, a market gets a
period suffix). Stored data that still uses an old name is translated here and
every unknown name is logged so the alias tables can be kept current.
"""

import typing as t

from odds_client.logger import logger
from odds_client.models import FEATURED_MARKETS, MigrationAlias, MigrationReport
from odds_client.reference import BOOKMAKER_KEYS, MARKET_KEYS

MARKET_ALIASES: dict[str, str] = {
    "moneyline": "h2h",
    "ml": "h2h",
    "head_to_head": "h2h",
    "spread": "spreads",
    "point_spread": "spreads",
    "handicap": "spreads",
    "total": "totals",
    "over_under": "totals",
    "ou": "totals",
    "futures": "outrights",
    # periods
    "q1_h2h": "h2h_q1",
    "q1_spread": "spreads_q1",
    "q1_total": "totals_q1",
    "first_quarter_h2h": "h2h_q1",
    # player props
    "passing_yards": "player_pass_yds",
    "passing_touchdowns": "player_pass_tds",
    "rushing_yards": "player_rush_yds",
    "receiving_yards": "player_receive_yds",
    "points": "player_points",
    "assists": "player_assists",
    "rebounds": "player_rebounds",
}

BOOKMAKER_ALIASES: dict[str, str] = {
    "caesars": "williamhill_us",
    "william_hill": "williamhill_us",
    "draftkings_dfs": "pick6",
    "betonline": "betonlineag",
    "mybookie": "mybookieag",
    "betfair": "betfair_sb_uk",
    "betfair_exchange": "betfair_ex_uk",
}


class UnknownKeyError(ValueError):
    def __init__(self, kind: str, key: str):
        super().__init__(f"Unknown {kind} key: {key!r}")
        self.kind = kind
        self.key = key


def _normalize(key: str) -> str:
    return key.strip().lower()


def _migrate(
    kind: str,
    legacy_key: str,
    canonical: t.AbstractSet[str],
    aliases: t.Mapping[str, str],
    strict: bool,
) -> str:
    normalized = _normalize(legacy_key)
    if normalized in canonical:
        return normalized

    alias = aliases.get(normalized)
    if alias is not None:
        logger.warning(f"[migration] {kind} alias detected: {legacy_key!r} -> {alias!r}")
        return alias

    if strict:
        raise UnknownKeyError(kind, legacy_key)

    # Lenient passthrough: the result may still not be canonical.
    logger.error(
        f"[migration] Unknown {kind} key: {legacy_key!r}. Add it to the {kind} alias table."
    )
    return normalized


def migrate_market_key(legacy_key: str, *, strict: bool = False) -> str:
    return _migrate("market", legacy_key, MARKET_KEYS, MARKET_ALIASES, strict)


def migrate_bookmaker_key(legacy_key: str, *, strict: bool = False) -> str:
    return _migrate("bookmaker", legacy_key, BOOKMAKER_KEYS, BOOKMAKER_ALIASES, strict)


def migrate_market_keys(legacy_keys: t.Iterable[str], *, strict: bool = False) -> list[str]:
    return [migrate_market_key(key, strict=strict) for key in legacy_keys]


def migrate_bookmaker_keys(legacy_keys: t.Iterable[str], *, strict: bool = False) -> list[str]:
    return [migrate_bookmaker_key(key, strict=strict) for key in legacy_keys]


def is_featured_market(market_key: str) -> bool:
    return market_key in FEATURED_MARKETS


def requires_event_odds_endpoint(markets: t.Iterable[str]) -> bool:
    """True when any market has to be fetched per event instead of from `/odds`."""
    return any(not is_featured_market(m) for m in markets)


def _report(
    legacy_keys: t.Iterable[str],
    canonical: t.AbstractSet[str],
    aliases: t.Mapping[str, str],
) -> MigrationReport:
    legacy_keys = list(legacy_keys)
    report = MigrationReport(total_keys=len(legacy_keys))
    for key in legacy_keys:
        normalized = _normalize(key)
        if normalized in canonical:
            continue
        alias = aliases.get(normalized)
        if alias is not None:
            report.migrated_keys += 1
            report.aliases_used.append(MigrationAlias(old=key, new=alias))
        else:
            report.unknown_keys.append(key)
    return report


def generate_market_migration_report(legacy_keys: t.Iterable[str]) -> MigrationReport:
    return _report(legacy_keys, MARKET_KEYS, MARKET_ALIASES)


def generate_bookmaker_migration_report(legacy_keys: t.Iterable[str]) -> MigrationReport:
    return _report(legacy_keys, BOOKMAKER_KEYS, BOOKMAKER_ALIASES)
