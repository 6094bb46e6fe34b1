"""Provider error codes, user-facing messages and developer guidance.

Every failure the client raises is an `OddsAPIError`. Provider failures carry
the code from the JSON error body; everything else (transport errors,
undecodable bodies, unrecognized codes) is reported as `UNKNOWN_ERROR`.
"""

import typing as t

import msgspec
import msgspec.json

from odds_client.models import QuotaHeaders

ErrorCode = t.Literal[
    "MISSING_KEY",
    "INVALID_KEY",
    "DEACTIVATED_KEY",
    "EXCEEDED_FREQ_LIMIT",
    "OUT_OF_USAGE_CREDITS",
    "MISSING_REGION",
    "INVALID_REGION",
    "INVALID_BOOKMAKERS",
    "MISSING_MARKET",
    "INVALID_MARKET",
    "INVALID_MARKET_COMBO",
    "INVALID_DATE_FORMAT",
    "INVALID_ODDS_FORMAT",
    "INVALID_ALL_SPORTS_PARAM",
    "INVALID_SPORT",
    "UNKNOWN_SPORT",
    "INVALID_SCORES_DAYS_FROM",
    "INVALID_EVENT_IDS",
    "INVALID_EVENT_ID",
    "EVENT_NOT_FOUND",
    "MISSING_HISTORICAL_TIMESTAMP",
    "INVALID_HISTORICAL_TIMESTAMP",
    "INVALID_COMMENCE_TIME_FROM",
    "INVALID_COMMENCE_TIME_TO",
    "INVALID_COMMENCE_TIME_RANGE",
    "INVALID_INCLUDE_LINKS",
    "INVALID_INCLUDE_SIDS",
    "INVALID_INCLUDE_BET_LIMITS",
    "INVALID_INCLUDE_MULTIPLIERS",
    "HISTORICAL_UNAVAILABLE_ON_FREE_USAGE_PLAN",
    "HISTORICAL_MARKETS_UNAVAILABLE_AT_DATE",
    "UNKNOWN_ERROR",
]

RATE_LIMIT_CODE: ErrorCode = "EXCEEDED_FREQ_LIMIT"

USER_MESSAGES: dict[ErrorCode, str] = {
    "MISSING_KEY": "API key is required. Please check your configuration.",
    "INVALID_KEY": "API key is invalid. Please verify your subscription.",
    "DEACTIVATED_KEY": "API key has been deactivated. Please renew your subscription.",
    "EXCEEDED_FREQ_LIMIT": "Rate limit exceeded. Please wait a few seconds and try again.",
    "OUT_OF_USAGE_CREDITS": "Monthly usage limit reached. Please upgrade your plan or wait for reset.",
    "MISSING_REGION": "Please select at least one region or bookmaker.",
    "INVALID_REGION": "One or more selected regions are invalid. Please check your selection.",
    "INVALID_BOOKMAKERS": "One or more selected bookmakers are invalid. Please check your selection.",
    "MISSING_MARKET": "Please select at least one market.",
    "INVALID_MARKET": "One or more selected markets are invalid for this sport.",
    "INVALID_MARKET_COMBO": "This sport only supports outrights market. Please select outrights.",
    "INVALID_DATE_FORMAT": "Invalid date format. Must be ISO8601 or unix.",
    "INVALID_ODDS_FORMAT": "Invalid odds format. Must be decimal or american.",
    "INVALID_ALL_SPORTS_PARAM": "Invalid sports filter. The all parameter must be true or false.",
    "INVALID_SPORT": "Invalid sport selection.",
    "UNKNOWN_SPORT": "Sport not found or not currently in season.",
    "INVALID_SCORES_DAYS_FROM": "Invalid daysFrom parameter. Must be 1-3.",
    "INVALID_EVENT_IDS": "Invalid event IDs provided.",
    "INVALID_EVENT_ID": "Invalid event ID. Event IDs must be 32 characters.",
    "EVENT_NOT_FOUND": "Event not found. It may have concluded or the ID is incorrect.",
    "MISSING_HISTORICAL_TIMESTAMP": "Historical date parameter is required.",
    "INVALID_HISTORICAL_TIMESTAMP": "Invalid historical timestamp. Must be ISO8601 format.",
    "INVALID_COMMENCE_TIME_FROM": "Invalid commenceTimeFrom. Must be ISO8601 format.",
    "INVALID_COMMENCE_TIME_TO": "Invalid commenceTimeTo. Must be ISO8601 format.",
    "INVALID_COMMENCE_TIME_RANGE": "commenceTimeTo must be later than commenceTimeFrom.",
    "INVALID_INCLUDE_LINKS": "includeLinks must be true or false.",
    "INVALID_INCLUDE_SIDS": "includeSids must be true or false.",
    "INVALID_INCLUDE_BET_LIMITS": "includeBetLimits must be true or false.",
    "INVALID_INCLUDE_MULTIPLIERS": "includeMultipliers must be true or false.",
    "HISTORICAL_UNAVAILABLE_ON_FREE_USAGE_PLAN": "Historical data requires a paid plan. Please upgrade.",
    "HISTORICAL_MARKETS_UNAVAILABLE_AT_DATE": "The requested markets were not available at that date.",
    "UNKNOWN_ERROR": "An unexpected error occurred. Please try again.",
}

ERROR_GUIDANCE: dict[ErrorCode, str] = {
    "MISSING_KEY": "Ensure ODDS_API_KEY environment variable is set",
    "INVALID_KEY": "Verify API key is correct and subscription is active",
    "DEACTIVATED_KEY": "Renew subscription at the-odds-api.com",
    "EXCEEDED_FREQ_LIMIT": "Implement exponential backoff; rate limit is ~30 req/s",
    "OUT_OF_USAGE_CREDITS": "Check quota headers; implement usage monitoring",
    "MISSING_REGION": "Provide regions or bookmakers parameter",
    "INVALID_REGION": "Use region keys from regions.csv: us, us2, uk, eu, au, us_dfs, us_ex",
    "INVALID_BOOKMAKERS": "Use bookmaker keys from bookmakers.csv",
    "MISSING_MARKET": "Provide markets parameter or let it default to h2h",
    "INVALID_MARKET": "Use event odds for non-featured markets; check markets.csv",
    "INVALID_MARKET_COMBO": "For outrights sports, only outrights market is valid",
    "INVALID_DATE_FORMAT": 'Use dateFormat: "iso" or "unix"',
    "INVALID_ODDS_FORMAT": 'Use oddsFormat: "decimal" or "american"',
    "INVALID_ALL_SPORTS_PARAM": "For /sports endpoint, all must be true or false",
    "INVALID_SPORT": "Check sport key exists in /sports response",
    "UNKNOWN_SPORT": "Sport not found; call /sports to get active sports",
    "INVALID_SCORES_DAYS_FROM": "daysFrom must be integer 1-3",
    "INVALID_EVENT_IDS": "Event IDs must be comma-separated 32-char strings",
    "INVALID_EVENT_ID": "Event ID must be exactly 32 characters",
    "EVENT_NOT_FOUND": "Event concluded or ID incorrect; verify with /events",
    "MISSING_HISTORICAL_TIMESTAMP": "Provide date parameter in ISO8601 format",
    "INVALID_HISTORICAL_TIMESTAMP": "Use ISO8601 format: YYYY-MM-DDTHH:mm:ssZ",
    "INVALID_COMMENCE_TIME_FROM": "Use ISO8601 format for commenceTimeFrom",
    "INVALID_COMMENCE_TIME_TO": "Use ISO8601 format for commenceTimeTo",
    "INVALID_COMMENCE_TIME_RANGE": "Ensure commenceTimeTo > commenceTimeFrom",
    "INVALID_INCLUDE_LINKS": 'includeLinks must be boolean or "true"/"false" string',
    "INVALID_INCLUDE_SIDS": 'includeSids must be boolean or "true"/"false" string',
    "INVALID_INCLUDE_BET_LIMITS": 'includeBetLimits must be boolean or "true"/"false" string',
    "INVALID_INCLUDE_MULTIPLIERS": "includeMultipliers must be boolean (DFS only)",
    "HISTORICAL_UNAVAILABLE_ON_FREE_USAGE_PLAN": "Historical endpoints require paid subscription",
    "HISTORICAL_MARKETS_UNAVAILABLE_AT_DATE": "Try different timestamp or markets",
    "UNKNOWN_ERROR": "Check logs for details; may be network or server issue",
}

KNOWN_CODES: frozenset[str] = frozenset(t.get_args(ErrorCode))


class ErrorBody(msgspec.Struct, frozen=True):
    """`{"code": "...", "message": "..."}` as returned with a non-2xx status."""

    message: str = ""
    code: str | None = None


class OddsAPIError(Exception):
    code: ErrorCode
    message: str
    status_code: int
    retryable: bool
    user_message: str
    quota: QuotaHeaders | None

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: int,
        retryable: bool = False,
        quota: QuotaHeaders | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.retryable = retryable
        self.quota = quota
        self.user_message = USER_MESSAGES.get(code) or message

    def __str__(self) -> str:
        return f"[{self.code}] {self.message} (HTTP {self.status_code})"

    @property
    def guidance(self) -> str:
        return ERROR_GUIDANCE[self.code]

    @classmethod
    def from_response(
        cls,
        body: t.Mapping[str, t.Any] | ErrorBody,
        status_code: int,
        quota: QuotaHeaders | None = None,
    ) -> "OddsAPIError":
        if isinstance(body, ErrorBody):
            raw_code, message = body.code, body.message
        else:
            raw_code, message = body.get("code"), str(body.get("message") or "")

        code: ErrorCode = (
            t.cast(ErrorCode, raw_code) if raw_code in KNOWN_CODES else "UNKNOWN_ERROR"
        )
        return cls(
            code,
            message,
            status_code,
            retryable=code == RATE_LIMIT_CODE,
            quota=quota,
        )

    @classmethod
    def from_content(
        cls, content: bytes, status_code: int, quota: QuotaHeaders | None = None
    ) -> "OddsAPIError":
        try:
            body = msgspec.json.decode(content, type=ErrorBody)
        except msgspec.MsgspecError:
            text = content.decode("utf-8", errors="replace").strip()
            return cls("UNKNOWN_ERROR", text or f"HTTP {status_code}", status_code, quota=quota)
        return cls.from_response(body, status_code, quota=quota)

    @classmethod
    def unknown(cls, message: str, status_code: int = 500) -> "OddsAPIError":
        return cls("UNKNOWN_ERROR", message, status_code)

    @staticmethod
    def is_retryable(error: BaseException) -> bool:
        if isinstance(error, OddsAPIError):
            return error.retryable
        return False
