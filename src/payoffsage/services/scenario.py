"""Month-by-month payoff simulation for baseline and accelerated scenarios.

A scenario keeps one running balance per debt. Each simulated month:

1. one-time fundings dated in that calendar month join the payment pool;
2. gold loans take their interest-only payment, or the balloon once matured;
3. interest-included loans take their fixed installment without new interest;
4. standard loans accrue interest and take their minimum payment;
5. (accelerated only) whatever is left of the pool is applied as extra
   payment in strategy priority order, spilling over to the next debt;
6. debts at or below the paid-off threshold are retired and their payment is
   released to the rest of the plan from the following month.

Contractual payments (steps 2-4) are always made. When they exceed the pool
the overdraw is recorded as a shortfall for the month.

The baseline scenario pays contractual amounts only: no strategy, no extra
payments and no fundings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from ..domain.debts import (
    Debt,
    GoldLoanDebt,
    InterestIncludedDebt,
    StandardDebt,
    partition_debts,
    to_debts,
)
from ..domain.payoff import PayoffDetails, PayoffStatus, RolloverEvent
from ..models.debt import DebtRecord
from ..models.funding import OneTimeFunding
from .interest import ensure_precision, is_debt_payable, monthly_interest
from .months import add_months, month_offset, resolve_start
from .payments import PAID_OFF_THRESHOLD, apply_payment, is_paid_off
from .strategies import AVALANCHE, Strategy

logger = logging.getLogger(__name__)

MAX_MONTHS = 1200  # 100 years
_PROGRESS_TOLERANCE = 0.005


@dataclass(slots=True)
class DebtAllocation:
    """What happened to one debt in one simulated month."""

    debt_id: str
    starting_balance: float
    interest: float
    minimum_paid: float
    extra_paid: float
    ending_balance: float

    @property
    def total_paid(self) -> float:
        return ensure_precision(self.minimum_paid + self.extra_paid)


@dataclass(slots=True)
class MonthOutcome:
    """Aggregate state of a scenario after one simulated month."""

    month: int
    date: date
    funding: float
    pool: float
    rollover: float
    extra_available: float
    shortfall: float
    interest: float
    total_balance: float
    allocations: dict[str, DebtAllocation] = field(default_factory=dict)
    retired: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ScenarioResult:
    """Outcome of running one scenario to completion."""

    months: Optional[int]
    total_interest: Optional[float]
    payoff_date: Optional[date]
    status: PayoffStatus
    start: date
    months_simulated: int
    interest_accrued: float
    payments: dict[str, float] = field(default_factory=dict)
    debts: dict[str, PayoffDetails] = field(default_factory=dict)
    rollovers: list[RolloverEvent] = field(default_factory=list)
    shortfall_months: list[int] = field(default_factory=list)
    non_payable_ids: list[str] = field(default_factory=list)

    @property
    def is_payable(self) -> bool:
        return self.status is PayoffStatus.PAID_OFF

    def summary(self) -> PayoffDetails:
        """Collapse the scenario into aggregate payoff details."""

        if not self.is_payable:
            return PayoffDetails.unpayable(self.status, redistribution_history=list(self.rollovers))
        return PayoffDetails(
            months=self.months,
            total_interest=self.total_interest,
            payoff_date=self.payoff_date,
            status=self.status,
            redistribution_history=list(self.rollovers),
        )


def fundings_by_month(fundings: Iterable[OneTimeFunding], start: date) -> dict[int, float]:
    """Sum fundings per month offset from ``start``; earlier fundings are dropped."""

    totals: dict[int, float] = {}
    for funding in fundings:
        offset = month_offset(start, funding.payment_date)
        if offset < 0:
            continue
        totals[offset] = ensure_precision(totals.get(offset, 0.0) + float(funding.amount))
    return totals


def _released_amount(debt: Debt) -> float:
    if isinstance(debt, GoldLoanDebt):
        return debt.minimum_payment or monthly_interest(debt.balance, debt.interest_rate)
    return debt.minimum_payment


class ScenarioSimulator:
    """Steps a single scenario one calendar month at a time.

    The simulator owns its balance map; input records are never mutated, so
    independent simulators can run side by side.
    """

    def __init__(
        self,
        debts: Iterable[DebtRecord | Debt],
        *,
        monthly_payment: float = 0.0,
        strategy: Strategy | None = None,
        fundings: Iterable[OneTimeFunding] = (),
        accelerated: bool = True,
        start: date | None = None,
        max_months: int = MAX_MONTHS,
        threshold: float = PAID_OFF_THRESHOLD,
    ) -> None:
        self.debts = to_debts(debts)
        self.accelerated = accelerated
        self.start = resolve_start(start)
        self.max_months = max_months
        self.threshold = threshold
        self.monthly_payment = max(float(monthly_payment or 0.0), 0.0)
        self.strategy = (strategy or AVALANCHE) if accelerated else None

        gold, included, standard = partition_debts(self.debts)
        self._gold: list[GoldLoanDebt] = gold
        self._included: list[InterestIncludedDebt] = included
        self._standard: list[StandardDebt] = (
            self.strategy.calculate(standard) if self.strategy is not None else standard
        )
        self._by_id: dict[str, Debt] = {d.id: d for d in self.debts}
        self._maturity = {d.id: month_offset(self.start, d.final_payment_date) for d in gold}
        self._fundings = fundings_by_month(fundings, self.start) if accelerated else {}
        self._last_funding_month = max(self._fundings, default=-1)

        self.month = 0
        self.total_interest = 0.0
        self.released = 0.0
        self.stalled = False
        self.balances: dict[str, float] = {}
        self.interest_by_debt: dict[str, float] = {}
        self.payoff_month: dict[str, int] = {}
        self.rollovers: list[RolloverEvent] = []
        self.shortfall_months: list[int] = []
        self.first_month_payments: dict[str, float] = {}
        self._active: set[str] = set()

        for debt in self.debts:
            balance = ensure_precision(max(debt.balance, 0.0))
            self.balances[debt.id] = balance
            self.interest_by_debt[debt.id] = 0.0
            if is_paid_off(balance, threshold):
                self.balances[debt.id] = 0.0
                self.payoff_month[debt.id] = 0
            else:
                self._active.add(debt.id)

        # Minimum-only plans cannot outgrow interest; flag those debts up front.
        self._non_payable: set[str] = set()
        if not accelerated:
            self._non_payable = {
                d.id for d in self.debts if d.id in self._active and not is_debt_payable(d)
            }

    @property
    def finished(self) -> bool:
        return not self._active

    @property
    def non_payable(self) -> bool:
        return bool(self._non_payable) or self.stalled

    @property
    def settled(self) -> bool:
        """True once further months cannot change how the scenario ends."""

        if self.finished or self.stalled:
            return True
        return bool(self._non_payable) and self._active.issubset(self._non_payable)

    def total_balance(self) -> float:
        return ensure_precision(sum(self.balances.values()))

    def _settle(self, debt: Debt, interest: float, payment: float) -> DebtAllocation:
        starting = self.balances[debt.id]
        ending = apply_payment(starting, payment, interest)
        self.balances[debt.id] = ending
        if interest:
            self.interest_by_debt[debt.id] = ensure_precision(self.interest_by_debt[debt.id] + interest)
        return DebtAllocation(
            debt_id=debt.id,
            starting_balance=starting,
            interest=interest,
            minimum_paid=payment,
            extra_paid=0.0,
            ending_balance=ending,
        )

    def _outgrows_budget(self, debt: StandardDebt, interest: float, month: int) -> bool:
        """True when no later month can pay more than ``debt`` accrues.

        Once the last funding has landed, a debt receives at most its minimum or
        the whole monthly budget, whichever is larger.
        """

        if month <= self._last_funding_month:
            return False
        return interest >= max(debt.minimum_payment, self.monthly_payment)

    def step(self) -> MonthOutcome:
        """Simulate the next month and return its outcome."""

        month = self.month
        funding = self._fundings.get(month, 0.0)
        pool = ensure_precision(self.monthly_payment + funding) if self.accelerated else 0.0
        rollover = self.released
        allocations: dict[str, DebtAllocation] = {}

        # Gold loans are serviced first: interest only until the maturity month, then the balloon.
        for debt in self._gold:
            if debt.id not in self._active:
                continue
            balance = self.balances[debt.id]
            interest = monthly_interest(balance, debt.interest_rate)
            if month >= self._maturity[debt.id]:
                payment = ensure_precision(balance + interest)
            else:
                payment = interest
            allocations[debt.id] = self._settle(debt, interest, payment)

        # Flagged debts are frozen at their last balance.
        for debt in self._included:
            if debt.id not in self._active or debt.id in self._non_payable:
                continue
            payment = min(debt.minimum_payment, self.balances[debt.id])
            allocations[debt.id] = self._settle(debt, 0.0, payment)

        for debt in self._standard:
            if debt.id not in self._active or debt.id in self._non_payable:
                continue
            balance = self.balances[debt.id]
            interest = monthly_interest(balance, debt.interest_rate)
            if self.accelerated and self._outgrows_budget(debt, interest, month):
                self._non_payable.add(debt.id)
                logger.warning(
                    "Interest exceeds every payment the plan can make; debt cannot be retired",
                    extra={"month": month, "debt_id": debt.id, "interest": interest},
                )
                continue
            payment = min(debt.minimum_payment, ensure_precision(balance + interest))
            allocations[debt.id] = self._settle(debt, interest, payment)

        due = ensure_precision(sum(a.minimum_paid for a in allocations.values()))
        shortfall = 0.0
        extra_available = 0.0
        if self.accelerated:
            shortfall = max(0.0, ensure_precision(due - pool))
            extra_available = max(0.0, ensure_precision(pool - due))
            if shortfall > 0:
                self.shortfall_months.append(month)
                logger.debug(
                    "Contractual payments exceed the monthly pool",
                    extra={"month": month, "due": due, "pool": pool, "shortfall": shortfall},
                )

        remaining = extra_available
        for debt in self._standard:
            if remaining <= 0:
                break
            allocation = allocations.get(debt.id)
            if allocation is None or is_paid_off(allocation.ending_balance, self.threshold):
                continue
            extra = min(remaining, allocation.ending_balance)
            allocation.extra_paid = ensure_precision(allocation.extra_paid + extra)
            allocation.ending_balance = ensure_precision(allocation.ending_balance - extra)
            self.balances[debt.id] = allocation.ending_balance
            remaining = ensure_precision(remaining - extra)

        interest = ensure_precision(sum(a.interest for a in allocations.values()))
        self.total_interest = ensure_precision(self.total_interest + interest)

        progressed = False
        retired: list[str] = []
        for debt_id, allocation in allocations.items():
            debt = self._by_id[debt_id]
            if not isinstance(debt, GoldLoanDebt) and (
                allocation.ending_balance < allocation.starting_balance - _PROGRESS_TOLERANCE
            ):
                progressed = True
            if not is_paid_off(allocation.ending_balance, self.threshold):
                continue
            allocation.ending_balance = 0.0
            self.balances[debt_id] = 0.0
            self._active.discard(debt_id)
            self.payoff_month[debt_id] = month + 1
            retired.append(debt_id)
            if self.accelerated:
                amount = _released_amount(debt)
                self.released = ensure_precision(self.released + amount)
                self.rollovers.append(RolloverEvent(from_debt_id=debt_id, amount=amount, month=month))

        if month == 0:
            self.first_month_payments = {
                debt_id: allocation.total_paid for debt_id, allocation in allocations.items()
            }

        if self.accelerated and self._active and not progressed:
            amortizing_left = any(
                not isinstance(self._by_id[debt_id], GoldLoanDebt) and debt_id not in self._non_payable
                for debt_id in self._active
            )
            gold_left = any(debt.id in self._active for debt in self._gold)
            if amortizing_left and not gold_left and month >= self._last_funding_month:
                self.stalled = True
                logger.warning(
                    "Payments no longer cover interest; plan cannot retire remaining debts",
                    extra={"month": month, "active": sorted(self._active)},
                )

        self.month += 1
        return MonthOutcome(
            month=month,
            date=add_months(self.start, month),
            funding=funding,
            pool=pool,
            rollover=rollover,
            extra_available=extra_available,
            shortfall=shortfall,
            interest=interest,
            total_balance=self.total_balance(),
            allocations=allocations,
            retired=retired,
        )

    def status(self) -> PayoffStatus:
        if self.finished:
            return PayoffStatus.PAID_OFF
        if self.non_payable:
            return PayoffStatus.NON_PAYABLE
        return PayoffStatus.HORIZON_EXCEEDED

    def _debt_details(self, debt: Debt, status: PayoffStatus) -> PayoffDetails:
        months = self.payoff_month.get(debt.id)
        if months is None:
            if debt.id in self._non_payable or self.stalled:
                debt_status = PayoffStatus.NON_PAYABLE
            else:
                debt_status = status if status is not PayoffStatus.PAID_OFF else PayoffStatus.HORIZON_EXCEEDED
            return PayoffDetails.unpayable(debt_status, proposed_payment=debt.minimum_payment)
        received = [
            event
            for event in self.rollovers
            if event.from_debt_id != debt.id and event.month < months - 1
        ]
        return PayoffDetails(
            months=months,
            total_interest=self.interest_by_debt[debt.id],
            payoff_date=add_months(self.start, months),
            status=PayoffStatus.PAID_OFF,
            redistribution_history=received if isinstance(debt, StandardDebt) else [],
            proposed_payment=self.first_month_payments.get(debt.id, debt.minimum_payment),
        )

    def result(self) -> ScenarioResult:
        """Summarize the months simulated so far."""

        status = self.status()
        months: Optional[int] = None
        total_interest: Optional[float] = None
        payoff_date: Optional[date] = None
        if status is PayoffStatus.PAID_OFF:
            months = max(self.payoff_month.values(), default=0)
            total_interest = self.total_interest
            payoff_date = add_months(self.start, months)

        return ScenarioResult(
            months=months,
            total_interest=total_interest,
            payoff_date=payoff_date,
            status=status,
            start=self.start,
            months_simulated=self.month,
            interest_accrued=self.total_interest,
            payments=dict(self.first_month_payments),
            debts={debt.id: self._debt_details(debt, status) for debt in self.debts},
            rollovers=list(self.rollovers),
            shortfall_months=list(self.shortfall_months),
            non_payable_ids=sorted(self._non_payable),
        )


def calculate_scenario(
    debts: Iterable[DebtRecord | Debt],
    monthly_payment: float,
    one_time_fundings: Iterable[OneTimeFunding] = (),
    is_accelerated: bool = True,
    *,
    strategy: Strategy | None = None,
    start: date | None = None,
    max_months: int = MAX_MONTHS,
) -> ScenarioResult:
    """Run one scenario until every debt is retired, it stalls, or the horizon is hit.

    ``monthly_payment`` is the whole monthly budget, minimums included; it is
    ignored for the baseline (``is_accelerated=False``), which pays contractual
    amounts only.
    """

    simulator = ScenarioSimulator(
        debts,
        monthly_payment=monthly_payment,
        strategy=strategy,
        fundings=one_time_fundings,
        accelerated=is_accelerated,
        start=start,
        max_months=max_months,
    )
    while not simulator.settled and simulator.month < simulator.max_months:
        simulator.step()

    result = simulator.result()
    logger.debug(
        "Scenario calculation complete",
        extra={
            "accelerated": is_accelerated,
            "strategy": simulator.strategy.id if simulator.strategy else None,
            "months": result.months,
            "months_simulated": result.months_simulated,
            "total_interest": result.total_interest,
            "status": result.status.value,
        },
    )
    if result.status is PayoffStatus.NON_PAYABLE:
        logger.warning(
            "Debts cannot be retired with the given payments",
            extra={"non_payable": result.non_payable_ids, "accelerated": is_accelerated},
        )
    elif result.status is PayoffStatus.HORIZON_EXCEEDED:
        logger.warning("Payoff exceeds the %s month horizon", max_months)
    if result.shortfall_months:
        logger.warning(
            "Monthly budget did not cover contractual payments in %s month(s)",
            len(result.shortfall_months),
        )
    return result


__all__ = [
    "MAX_MONTHS",
    "DebtAllocation",
    "MonthOutcome",
    "ScenarioResult",
    "ScenarioSimulator",
    "calculate_scenario",
    "fundings_by_month",
]
