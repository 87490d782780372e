"""Utility functions for date manipulation."""

from datetime import datetime

import pytz

from src.common.config.settings import settings

PAYMENT_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Layouts accepted from the payments form, tried in order
_PAYMENT_INPUT_FORMATS = (
    PAYMENT_DATETIME_FORMAT,
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d",
    "%d-%m-%Y %H:%M:%S",
    "%d-%m-%Y",
)


def current_payment_datetime() -> str:
    """Returns the server-side payment timestamp in the configured business timezone."""
    tz = pytz.timezone(settings.TIMEZONE)
    return datetime.now(tz).strftime(PAYMENT_DATETIME_FORMAT)


def normalize_payment_date_input(raw: str | None) -> str:
    """Converts a user supplied payment date to the canonical DATETIME string.

    Blank input means "now". Raises ValueError for unsupported layouts.
    """
    value = (raw or "").strip()
    if not value:
        return current_payment_datetime()

    for fmt in _PAYMENT_INPUT_FORMATS:
        try:
            return datetime.strptime(value, fmt).strftime(PAYMENT_DATETIME_FORMAT)
        except ValueError:
            continue

    raise ValueError(f"unsupported payment date format: {raw!r}")


def expand_date_bound(value: str, end_of_day: bool = False) -> str:
    """Turns a bare YYYY-MM-DD filter bound into a full-day DATETIME bound."""
    value = value.strip()
    if len(value) == len("2006-01-02"):
        return f"{value} 23:59:59" if end_of_day else f"{value} 00:00:00"
    return value


SHIP_DATE_FORMAT = "%Y-%m-%d"

_SHIP_DATE_INPUT_FORMATS = (SHIP_DATE_FORMAT, "%d-%m-%Y", "%d.%m.%Y")


def normalize_ship_date(raw: str | None) -> str:
    """Converts a dispatch day to YYYY-MM-DD. Raises ValueError when blank or unparseable."""
    value = (raw or "").strip()
    if not value:
        raise ValueError("ship date is required")

    for fmt in _SHIP_DATE_INPUT_FORMATS:
        try:
            return datetime.strptime(value, fmt).strftime(SHIP_DATE_FORMAT)
        except ValueError:
            continue

    raise ValueError(f"unsupported ship date format: {raw!r}")
