from dotenv import load_dotenv

_ = load_dotenv()

import os  # noqa: E402


def _flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


def _float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except (ValueError, TypeError):
        return default


class Env:
    ODDS_API_KEY = os.environ.get("ODDS_API_KEY") or None
    ODDS_API_USE_IPV6 = _flag("ODDS_API_USE_IPV6")
    ODDS_API_TIMEOUT = _float("ODDS_API_TIMEOUT", 30.0)

    LOG_DIR = os.environ.get("LOG_DIR", "./logs")
