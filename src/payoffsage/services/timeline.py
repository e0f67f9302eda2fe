"""Baseline vs accelerated payoff timelines for charts and reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from ..domain.debts import Debt, to_debts
from ..domain.payoff import PayoffStatus
from ..models.debt import DebtRecord
from ..models.funding import OneTimeFunding
from .interest import ensure_precision
from .months import add_months, month_label, resolve_start
from .scenario import MAX_MONTHS, ScenarioResult, ScenarioSimulator, fundings_by_month
from .strategies import Strategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TimelineDataPoint:
    """Both scenarios' balances and cumulative interest after one month."""

    date: date
    month_label: str
    month: int
    baseline_balance: float
    accelerated_balance: float
    baseline_interest: float
    accelerated_interest: float
    one_time_payment: Optional[float] = None
    currency_symbol: str = "£"


@dataclass(slots=True)
class TimelineResults:
    points: list[TimelineDataPoint]
    baseline: ScenarioResult
    accelerated: ScenarioResult
    interest_saved: Optional[float] = None
    months_saved: Optional[int] = None
    currency_symbol: str = "£"

    @property
    def baseline_months(self) -> Optional[int]:
        return self.baseline.months

    @property
    def accelerated_months(self) -> Optional[int]:
        return self.accelerated.months

    @property
    def baseline_interest(self) -> Optional[float]:
        return self.baseline.total_interest

    @property
    def accelerated_interest(self) -> Optional[float]:
        return self.accelerated.total_interest

    @property
    def baseline_payoff_date(self) -> Optional[date]:
        return self.baseline.payoff_date

    @property
    def accelerated_payoff_date(self) -> Optional[date]:
        return self.accelerated.payoff_date

    @property
    def baseline_status(self) -> PayoffStatus:
        return self.baseline.status

    @property
    def accelerated_status(self) -> PayoffStatus:
        return self.accelerated.status


@dataclass(slots=True)
class _TimelineRun:
    points: list[TimelineDataPoint] = field(default_factory=list)
    baseline: Optional[ScenarioSimulator] = None
    accelerated: Optional[ScenarioSimulator] = None


def _run_timeline(
    debts: Iterable[DebtRecord | Debt],
    total_monthly_payment: float,
    strategy: Strategy | None,
    one_time_fundings: Iterable[OneTimeFunding],
    start: date | None,
    currency_symbol: str,
    max_months: int,
) -> _TimelineRun:
    debts = to_debts(debts)
    start = resolve_start(start)
    fundings = list(one_time_fundings)
    funding_totals = fundings_by_month(fundings, start)

    baseline = ScenarioSimulator(debts, accelerated=False, start=start, max_months=max_months)
    accelerated = ScenarioSimulator(
        debts,
        monthly_payment=total_monthly_payment,
        strategy=strategy,
        fundings=fundings,
        accelerated=True,
        start=start,
        max_months=max_months,
    )
    run = _TimelineRun(baseline=baseline, accelerated=accelerated)
    if not debts:
        return run

    for month in range(max_months):
        if baseline.settled and accelerated.settled:
            break
        # Retired scenarios hold at zero balance and unchanged cumulative interest
        if not baseline.finished:
            baseline.step()
        if not accelerated.finished:
            accelerated.step()
        funding = funding_totals.get(month)
        run.points.append(
            TimelineDataPoint(
                date=add_months(start, month),
                month_label=month_label(add_months(start, month)),
                month=month,
                baseline_balance=baseline.total_balance(),
                accelerated_balance=accelerated.total_balance(),
                baseline_interest=baseline.total_interest,
                accelerated_interest=accelerated.total_interest,
                one_time_payment=funding if funding else None,
                currency_symbol=currency_symbol,
            )
        )
    return run


def calculate_timeline_data(
    debts: Iterable[DebtRecord | Debt],
    total_monthly_payment: float,
    strategy: Strategy | None = None,
    one_time_fundings: Iterable[OneTimeFunding] = (),
    start: date | None = None,
    currency_symbol: str = "£",
    max_months: int = MAX_MONTHS,
) -> list[TimelineDataPoint]:
    """Month-by-month balance and interest series for both scenarios.

    Returns an empty list when there are no debts.
    """

    run = _run_timeline(
        debts, total_monthly_payment, strategy, one_time_fundings, start, currency_symbol, max_months
    )
    return run.points


def calculate_timeline(
    debts: Iterable[DebtRecord | Debt],
    total_monthly_payment: float,
    strategy: Strategy | None = None,
    one_time_fundings: Iterable[OneTimeFunding] = (),
    start: date | None = None,
    currency_symbol: str = "£",
    max_months: int = MAX_MONTHS,
) -> TimelineResults:
    """Timeline points plus the payoff summary of each scenario and the savings."""

    run = _run_timeline(
        debts, total_monthly_payment, strategy, one_time_fundings, start, currency_symbol, max_months
    )
    baseline = run.baseline.result()
    accelerated = run.accelerated.result()

    interest_saved: Optional[float] = None
    months_saved: Optional[int] = None
    if baseline.is_payable and accelerated.is_payable:
        interest_saved = ensure_precision(baseline.total_interest - accelerated.total_interest)
        months_saved = baseline.months - accelerated.months

    logger.debug(
        "Timeline calculated",
        extra={
            "points": len(run.points),
            "baseline_status": baseline.status.value,
            "accelerated_status": accelerated.status.value,
            "interest_saved": interest_saved,
            "months_saved": months_saved,
        },
    )
    return TimelineResults(
        points=run.points,
        baseline=baseline,
        accelerated=accelerated,
        interest_saved=interest_saved,
        months_saved=months_saved,
        currency_symbol=currency_symbol,
    )


__all__ = [
    "TimelineDataPoint",
    "TimelineResults",
    "calculate_timeline",
    "calculate_timeline_data",
]
