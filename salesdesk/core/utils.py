"""Shared utility functions for the salesdesk package."""
import calendar
import os
from datetime import date, datetime, time
from pathlib import Path
import logging
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def get_config_value(key: str, default: str = "") -> str:
    """Get configuration value from Streamlit secrets or environment variables.

    Checks Streamlit secrets first (for hosted consoles), then falls back
    to environment variables (for local runs and the CLI).
    """
    try:
        import streamlit as st
        if hasattr(st, 'secrets') and key in st.secrets:
            return str(st.secrets[key])
    except (ImportError, FileNotFoundError, KeyError):
        pass

    return os.getenv(key, default)


def get_int_config(key: str, default: int) -> int:
    """Read an integer setting, falling back to ``default`` on bad input."""
    raw = get_config_value(key, "")
    if not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer value %r for %s", raw, key)
        return default


def load_env_file(path: Path) -> None:
    """Load environment variables from a file if it exists."""
    if not path.exists():
        return

    try:
        with path.open(encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                if not key or key in os.environ:
                    continue
                os.environ[key] = value.strip().strip('"').strip("'")
    except OSError as exc:
        logger.debug("Could not load env file %s: %s", path, exc)


def parse_timestamp(raw: object) -> Optional[datetime]:
    """Turn a stored date value into a naive local ``datetime``.

    Accepts ``datetime``/``date`` objects and ISO strings such as
    ``2024-01-31`` or ``2024-01-31T23:59:59``. Timezone-aware values are
    converted to local time. Returns ``None`` when nothing usable is found.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, date):
        return datetime.combine(raw, time.min)
    else:
        text = str(raw).strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    return to_local_naive(parsed)


def to_local_naive(moment: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def month_window(now: datetime) -> Tuple[datetime, datetime]:
    """Return the first and last instant of the calendar month containing ``now``."""
    last_day = calendar.monthrange(now.year, now.month)[1]
    start = datetime(now.year, now.month, 1)
    end = datetime(now.year, now.month, last_day, 23, 59, 59, 999999)
    return start, end


def today_iso() -> str:
    return date.today().isoformat()
