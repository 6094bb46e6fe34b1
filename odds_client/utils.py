import asyncio
import itertools
import typing as t

from odds_client.logger import logger


def int_safe(v: t.Any) -> int:
    try:
        return int(v)
    except (ValueError, TypeError):
        pass
    try:
        return int(float(v))
    except (ValueError, TypeError, OverflowError):
        return 0


def query_value(v: t.Any) -> str:
    """Serializes a parameter the way the provider expects it in a query string."""
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, str):
        return v
    if isinstance(v, t.Iterable):
        return ",".join(query_value(item) for item in v)
    return str(v)


def build_query_params(api_key: str, params: t.Mapping[str, t.Any]) -> list[tuple[str, str]]:
    """`apiKey` first, then `params` in insertion order. `None` values are dropped."""
    query = [("apiKey", api_key)]
    for key, value in params.items():
        if value is None:
            continue
        query.append((key, query_value(value)))
    return query


async def batch[R](tasks: t.Iterable[t.Awaitable[R]], batch_size: int = 10) -> list[R]:
    results: list[R] = []
    tasks = list(tasks)
    logger.info(f"batching {len(tasks)} requests")
    total = 0
    for batch in itertools.batched(tasks, batch_size):
        results.extend(await asyncio.gather(*batch))
        total += len(batch)
        logger.info(f"  {total} of {len(tasks)}")
    return results
