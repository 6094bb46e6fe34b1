import asyncio
import time
import types
import typing
from datetime import datetime, timezone
from urllib.parse import urlencode

import httpx
import msgspec.json

from odds_client.cache import ResponseCache
from odds_client.cost import estimate_cost
from odds_client.errors import OddsAPIError
from odds_client.logger import logger
from odds_client.models import APIResponse, QuotaHeaders
from odds_client.utils import build_query_params, int_safe

T = typing.TypeVar("T")
U = typing.TypeVar("U", bound="AsyncCachingClient")

ODDS_API_BASE = "https://api.the-odds-api.com"
ODDS_API_BASE_IPV6 = "https://ipv6-api.the-odds-api.com"

RATE_LIMIT_PER_SECOND = 30
RETRY_DELAYS: tuple[float, ...] = (1.0, 2.0, 4.0, 8.0)
DEFAULT_TIMEOUT = httpx.Timeout(30.0)

HEADER_REQUESTS_USED = "x-requests-used"
HEADER_REQUESTS_REMAINING = "x-requests-remaining"
HEADER_REQUESTS_LAST = "x-requests-last"


class AsyncCachingClient:
    """Request engine for The Odds API.

    Spaces outbound requests at least `1 / rate_limit_per_second` apart, caches
    successful responses for the TTL the caller asks for, retries the
    provider's rate-limit error along `retry_delays`, and reports the quota
    headers plus an estimated cost with every result.
    """

    __slots__ = (
        "_client",
        "_api_key",
        "_cache",
        "_clock",
        "_sleep",
        "_min_interval",
        "_retry_delays",
        "_last_request_time",
        "_rate_limit_lock",
    )

    _client: httpx.AsyncClient
    _cache: ResponseCache

    def __init__(
        self,
        api_key: str,
        *,
        use_ipv6: bool = False,
        base_url: httpx.URL | str | None = None,
        timeout: httpx.Timeout | float | None = DEFAULT_TIMEOUT,
        headers: typing.Mapping[str, str] | None = None,
        limits: httpx.Limits = httpx.Limits(max_connections=100, max_keepalive_connections=20),
        transport: httpx.AsyncBaseTransport | None = None,
        rate_limit_per_second: float = RATE_LIMIT_PER_SECOND,
        retry_delays: typing.Sequence[float] = RETRY_DELAYS,
        clock: typing.Callable[[], float] = time.monotonic,
        sleep: typing.Callable[[float], typing.Awaitable[None]] = asyncio.sleep,
    ):
        if not api_key:
            raise ValueError("ODDS_API_KEY is required")

        if base_url is None:
            base_url = ODDS_API_BASE_IPV6 if use_ipv6 else ODDS_API_BASE

        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            limits=limits,
            transport=transport,
        )
        self._api_key = api_key
        self._cache = ResponseCache(clock=clock)
        self._clock = clock
        self._sleep = sleep
        self._min_interval = 1.0 / rate_limit_per_second
        self._retry_delays = tuple(retry_delays)
        self._last_request_time = float("-inf")
        self._rate_limit_lock = asyncio.Lock()

    async def __aenter__(self: U) -> U:
        await self._client.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None = None,
        exc_value: BaseException | None = None,
        traceback: types.TracebackType | None = None,
    ) -> None:
        await self._client.__aexit__(exc_type, exc_value, traceback)

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    def clear_cache(self) -> None:
        self._cache.clear()

    async def _wait_for_rate_limit(self) -> None:
        async with self._rate_limit_lock:
            elapsed = self._clock() - self._last_request_time
            if elapsed < self._min_interval:
                await self._sleep(self._min_interval - elapsed)
            self._last_request_time = self._clock()

    @staticmethod
    def _quota_from_headers(headers: httpx.Headers) -> QuotaHeaders:
        return QuotaHeaders(
            requests_used=int_safe(headers.get(HEADER_REQUESTS_USED)),
            requests_remaining=int_safe(headers.get(HEADER_REQUESTS_REMAINING)),
            requests_last=headers.get(HEADER_REQUESTS_LAST)
            or datetime.now(timezone.utc).isoformat(),
        )

    def cache_key(self, endpoint: str, params: typing.Mapping[str, typing.Any]) -> str:
        return f"{endpoint}?{urlencode(build_query_params(self._api_key, params))}"

    async def get(
        self,
        endpoint: str,
        *,
        ty: typing.Type[T],
        params: typing.Mapping[str, typing.Any] | None = None,
        cache_ttl: float | None = None,
    ) -> APIResponse[T]:
        params = params or {}
        query = build_query_params(self._api_key, params)
        cache_key = self.cache_key(endpoint, params)
        retry_count = 0

        while True:
            if cache_ttl:
                cached = self._cache.get(cache_key)
                if cached is not None:
                    logger.debug(f"[odds_api] cache hit: {endpoint}")
                    return APIResponse(data=cached.data, quota=cached.quota, estimated_cost=0)

            await self._wait_for_rate_limit()

            estimated_cost = estimate_cost(endpoint, params)
            logger.info(f"[odds_api] {endpoint} - estimated cost: {estimated_cost}")

            try:
                response = await self._client.get(endpoint, params=query)
                quota = self._quota_from_headers(response.headers)
                logger.info(
                    f"[odds_api] quota - used: {quota.requests_used}, "
                    f"remaining: {quota.requests_remaining}"
                )

                if response.is_success:
                    data = msgspec.json.decode(response.content, type=ty)
                    error = None
                else:
                    error = OddsAPIError.from_content(
                        response.content, response.status_code, quota=quota
                    )
            except Exception as exc:
                logger.error(f"[odds_api] request failed: {endpoint}: {exc!r}")
                raise OddsAPIError.unknown(str(exc) or type(exc).__name__) from exc

            if error is None:
                if cache_ttl:
                    self._cache.set(cache_key, data, cache_ttl, quota)
                return APIResponse(data=data, quota=quota, estimated_cost=estimated_cost)

            if error.retryable and retry_count < len(self._retry_delays):
                delay = self._retry_delays[retry_count]
                retry_count += 1
                logger.warning(
                    f"[odds_api] rate limited on {endpoint}, retry {retry_count} "
                    f"of {len(self._retry_delays)} in {delay}s"
                )
                await self._sleep(delay)
                continue

            logger.error(f"[odds_api] {endpoint} failed: {error}")
            raise error
