"""Time and rounding helpers shared by the scoring modules."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

SECONDS_PER_DAY = 86400.0


def as_utc(ts: datetime) -> datetime:
    """Treat naive timestamps as UTC so aware/naive values can be mixed."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def days_between(start: datetime, end: datetime) -> float:
    """Fractional days from start to end, never negative."""
    return max(0.0, (as_utc(end) - as_utc(start)).total_seconds() / SECONDS_PER_DAY)


def whole_days_between(start: datetime, end: datetime) -> int:
    return int(days_between(start, end))


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round like a human would (2.5 -> 3), unlike Python's banker's rounding.
    The value is first trimmed to 9 places so float noise such as
    17.499999999999996 does not flip the result.
    """
    quantum = Decimal(1).scaleb(-digits)
    trimmed = Decimal(repr(round(value, 9)))
    return float(trimmed.quantize(quantum, rounding=ROUND_HALF_UP))


def mean_or_none(values: Iterable[Optional[float]]) -> Optional[float]:
    """Mean of the defined values; None when there are none."""
    defined = [v for v in values if v is not None]
    if not defined:
        return None
    return sum(defined) / len(defined)


def round_or_none(value: Optional[float], digits: int = 1) -> Optional[float]:
    if value is None:
        return None
    return round_half_up(value, digits)
