"""Quota cost of a request, estimated before it is sent.

The provider is the real authority on usage; the estimate is only logged and
reported back with each response.
"""

import re
import typing as t

_EVENT_ODDS_PATH = re.compile(r"/events/[^/]+/odds")


def _count(value: t.Any) -> int:
    if value is None:
        return 1
    if isinstance(value, str):
        value = [part for part in value.split(",") if part.strip()]
    try:
        return len(value) or 1
    except TypeError:
        return 1


def estimate_cost(endpoint: str, params: t.Mapping[str, t.Any] | None = None) -> int:
    params = params or {}
    markets = _count(params.get("markets"))
    regions = _count(params.get("regions"))

    if "/historical" in endpoint:
        return 10 * markets * regions
    if "/scores" in endpoint or "/markets" in endpoint:
        return 1
    if _EVENT_ODDS_PATH.search(endpoint):
        return 10 * markets * regions
    if "/odds" in endpoint:
        return markets * regions
    if "/participants" in endpoint:
        return 1
    if "/sports" in endpoint:
        # sport list and event list are free
        return 0
    return 1
