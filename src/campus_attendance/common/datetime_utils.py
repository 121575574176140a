from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Union

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def date_key(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def time_key(value: Union[datetime, time]) -> str:
    return value.strftime("%H:%M:%S")


def optional_date(value: Optional[str]) -> Optional[date]:
    """Parse an optional YYYY-MM-DD query value; blank means "not given"."""
    value = (value or "").strip()
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"Invalid date: {value}")
