"""Calendar-month arithmetic for simulations.

Simulations count months as integer offsets from a start month. Funding
matches and maturity checks compare those offsets rather than raw dates, which
keeps day-of-month and timezone quirks out of the loop.
"""

from __future__ import annotations

import calendar
from datetime import date


def month_key(value: date) -> int:
    """Return an absolute month number (year * 12 + zero-based month)."""

    return value.year * 12 + (value.month - 1)


def month_offset(start: date, value: date) -> int:
    """Return how many calendar months ``value`` lies after ``start``."""

    return month_key(value) - month_key(start)


def add_months(value: date, months: int) -> date:
    """Shift ``value`` by whole months, clamping the day to the target month."""

    key = month_key(value) + months
    year, month = divmod(key, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def month_label(value: date) -> str:
    """Return a short label such as ``Jan 2027``."""

    return value.strftime("%b %Y")


def resolve_start(start: date | None) -> date:
    """Default the simulation start to today."""

    return start or date.today()


def schedule_start(next_payment_date: date | None, start: date | None) -> date:
    """Date the first payment of a single-debt schedule.

    The debt's next payment date anchors the schedule unless it falls before an
    explicit ``start``; without either the schedule begins today.
    """

    if next_payment_date is not None and (start is None or next_payment_date >= start):
        return next_payment_date
    return resolve_start(start)


__all__ = ["add_months", "month_key", "month_label", "month_offset", "resolve_start", "schedule_start"]
