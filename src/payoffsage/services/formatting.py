"""Human-readable labels for amounts, durations and payoff dates."""

from __future__ import annotations

from typing import Optional

from ..domain.payoff import PayoffDetails, PayoffStatus


def format_currency(amount: float, currency_symbol: str = "£") -> str:
    """Format ``amount`` with thousands separators and two decimals."""

    sign = "-" if amount < 0 else ""
    return f"{sign}{currency_symbol}{abs(amount):,.2f}"


def format_timeframe(months: Optional[int]) -> str:
    """Render a month count as ``"2 years 3 months"``."""

    if months is None:
        return "Never"
    years, remainder = divmod(int(months), 12)
    parts = []
    if years:
        parts.append(f"{years} year{'s' if years != 1 else ''}")
    if remainder or not years:
        parts.append(f"{remainder} month{'s' if remainder != 1 else ''}")
    return " ".join(parts)


def format_payoff_date(details: PayoffDetails) -> str:
    if details.status is PayoffStatus.NON_PAYABLE:
        return "Never"
    if details.status is PayoffStatus.HORIZON_EXCEEDED or details.payoff_date is None:
        return "Beyond 100 years"
    return details.payoff_date.strftime("%B %Y")


__all__ = ["format_currency", "format_payoff_date", "format_timeframe"]
