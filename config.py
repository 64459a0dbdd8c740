"""Application configuration -- environment variables and derived constants.

Loads ``BOT_TOKEN`` and the polling options from the environment via
``python-dotenv``.  All values are resolved at import time so other modules
can ``from config import …`` without repeated lookups.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import logging
import os

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── core ─────────────────────────────────────────────────────────────────────
from tgcore.logger import BotLogger

# ── Environment bootstrap ────────────────────────────────────────────────────
load_dotenv()

# ── Logger (used for startup diagnostics at the bottom of this module) ───────
logger = BotLogger.get_logger()


# ── Helper functions (private) ───────────────────────────────────────────────

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _parse_seconds(name: str, default: float) -> float:
    """Read a non-negative duration in seconds from environment variable *name*.

    Missing, non-numeric or negative values fall back to *default*.
    """
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid duration, using default", extra={"variable": name, "value": raw, "default": default})
        return default
    if value < 0:
        logger.warning("Negative duration, using default", extra={"variable": name, "value": raw, "default": default})
        return default
    return value


def _parse_bool(name: str, default: bool = False) -> bool:
    """Read a boolean flag (``1/0``, ``true/false``, ``yes/no``, ``on/off``)."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    token = raw.strip().lower()
    if token in _TRUE_VALUES:
        return True
    if token in _FALSE_VALUES:
        return False
    logger.warning("Invalid boolean, using default", extra={"variable": name, "value": raw, "default": default})
    return default


def _parse_log_level(raw: str | None) -> int:
    level = logging.getLevelName((raw or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


# ── Public constants ─────────────────────────────────────────────────────────

BOT_TOKEN: str | None = os.environ.get("BOT_TOKEN")
API_URL: str = os.environ.get("API_URL") or "https://api.telegram.org/bot"
POLL_TIMEOUT: float = _parse_seconds("POLL_TIMEOUT", 60.0)
RETRY_DELAY: float = _parse_seconds("RETRY_DELAY", 5.0)
NO_UPDATES: bool = _parse_bool("NO_UPDATES")
LOG_LEVEL: int = _parse_log_level(os.environ.get("LOG_LEVEL"))

logger.setLevel(LOG_LEVEL)
for _handler in logger.handlers:
    _handler.setLevel(LOG_LEVEL)


# ── Startup diagnostics ─────────────────────────────────────────────────────

if BOT_TOKEN:
    logger.info("Config loaded: BOT_TOKEN is set", extra={"api_url": API_URL})
else:
    logger.warning("Config loaded: BOT_TOKEN is NOT set")

logger.info(
    "Polling options resolved",
    extra={"poll_timeout": POLL_TIMEOUT, "retry_delay": RETRY_DELAY, "no_updates": NO_UPDATES},
)
