"""Timezone and calendar-date utilities for US/Eastern market time."""

from datetime import date, datetime
from typing import Union

import pytz
from dateutil import parser as date_parser

EASTERN_TZ = pytz.timezone("US/Eastern")


def now_eastern() -> datetime:
    """Return current time in US/Eastern timezone."""
    return datetime.now(EASTERN_TZ)


def today_eastern() -> date:
    """Return today's calendar date on the US/Eastern market clock."""
    return now_eastern().date()


def parse_trade_date(value: Union[str, date, datetime]) -> date:
    """
    Parse a transaction date into a calendar date.

    Accepts ``date``/``datetime`` objects, ``YYYY-MM-DD`` strings and any
    other format dateutil understands. Time components are discarded.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        raise ValueError("Date is required")
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"Unrecognized date format: '{text}'") from exc


def date_str(d: date) -> str:
    """Format a calendar date as ``YYYY-MM-DD``."""
    return d.isoformat()
