"""Result records shared by the payoff calculators."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class PayoffStatus(str, Enum):
    """How a simulation ended."""

    PAID_OFF = "paid_off"
    NON_PAYABLE = "non_payable"
    HORIZON_EXCEEDED = "horizon_exceeded"


@dataclass(frozen=True, slots=True)
class RolloverEvent:
    """A retired debt's payment released to the rest of the plan."""

    from_debt_id: str
    amount: float
    month: int


@dataclass(slots=True)
class PayoffDetails:
    """Months, interest and payoff date for one debt or a whole plan.

    ``months``, ``total_interest`` and ``payoff_date`` are ``None`` unless
    ``status`` is ``PAID_OFF``; check ``is_payable`` before formatting a date.
    """

    months: Optional[int]
    total_interest: Optional[float]
    payoff_date: Optional[date]
    status: PayoffStatus = PayoffStatus.PAID_OFF
    redistribution_history: list[RolloverEvent] = field(default_factory=list)
    proposed_payment: Optional[float] = None

    @property
    def is_payable(self) -> bool:
        return self.status is PayoffStatus.PAID_OFF

    @classmethod
    def unpayable(cls, status: PayoffStatus, **kwargs) -> "PayoffDetails":
        """Build the sentinel returned when no payoff date exists."""

        return cls(months=None, total_interest=None, payoff_date=None, status=status, **kwargs)


__all__ = ["PayoffDetails", "PayoffStatus", "RolloverEvent"]
