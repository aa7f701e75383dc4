from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.constants import DATETIME_FORMAT


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so services can take it as an injectable clock.
    """
    return datetime.now()


def whole_minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, floored; negative when end < start."""
    return int((end - start).total_seconds() // 60)


def to_unix(value: datetime) -> int:
    return int(value.timestamp())


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.strftime(DATETIME_FORMAT) if value else None


def truncate_to_second(value: datetime) -> datetime:
    """Drop microseconds; DATETIME columns store whole seconds."""
    return value.replace(microsecond=0)
