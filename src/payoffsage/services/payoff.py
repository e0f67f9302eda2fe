"""Payoff details for single debts and whole plans."""

from __future__ import annotations

import logging
import math
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ..domain.debts import Debt, GoldLoanDebt, InterestIncludedDebt, to_debt
from ..domain.payoff import PayoffDetails, PayoffStatus
from ..models.debt import DebtRecord
from ..models.funding import OneTimeFunding
from .amortization import build_amortization_schedule, calculate_gold_loan_schedule
from .interest import ensure_precision, monthly_interest
from .months import add_months, schedule_start
from .payments import is_paid_off
from .scenario import MAX_MONTHS, calculate_scenario
from .strategies import Strategy

logger = logging.getLogger(__name__)


def _ceil_div(amount: float, payment: float) -> int:
    # Decimal keeps e.g. 1.1 / 0.1 from rounding up to 12
    return math.ceil(Decimal(str(amount)) / Decimal(str(payment)))


def calculate_single_debt_payoff(
    debt: DebtRecord | Debt,
    monthly_payment: Optional[float] = None,
    start: date | None = None,
    max_months: int = MAX_MONTHS,
) -> PayoffDetails:
    """Months, interest and payoff date for one debt paid at a fixed amount.

    Zero-interest and interest-included debts use closed-form division. Gold
    loans run to their maturity balloon. Standard debts are amortized month by
    month. Debts whose payment never outpaces interest return the
    ``NON_PAYABLE`` sentinel.
    """

    debt = to_debt(debt)
    start = schedule_start(debt.next_payment_date, start)
    payment = debt.minimum_payment if monthly_payment is None else float(monthly_payment)

    if is_paid_off(debt.balance):
        return PayoffDetails(months=0, total_interest=0.0, payoff_date=start, proposed_payment=payment)

    if isinstance(debt, GoldLoanDebt):
        rows = calculate_gold_loan_schedule(debt, start, max_months)
        if not rows or not is_paid_off(rows[-1].ending_balance):
            return PayoffDetails.unpayable(PayoffStatus.HORIZON_EXCEEDED, proposed_payment=payment)
        months = len(rows)
        return PayoffDetails(
            months=months,
            total_interest=ensure_precision(sum(row.interest for row in rows)),
            payoff_date=add_months(start, months),
            proposed_payment=rows[0].payment,
        )

    if isinstance(debt, InterestIncludedDebt) or debt.interest_rate == 0:
        if payment <= 0:
            logger.warning("Debt %s has no payment and can never be repaid", debt.id)
            return PayoffDetails.unpayable(PayoffStatus.NON_PAYABLE, proposed_payment=payment)
        months = _ceil_div(debt.balance, payment)
        if months > max_months:
            return PayoffDetails.unpayable(PayoffStatus.HORIZON_EXCEEDED, proposed_payment=payment)
        return PayoffDetails(
            months=months,
            total_interest=0.0,
            payoff_date=add_months(start, months),
            proposed_payment=payment,
        )

    if payment <= monthly_interest(debt.balance, debt.interest_rate):
        logger.warning(
            "Payment does not exceed monthly interest",
            extra={"debt_id": debt.id, "payment": payment, "rate": debt.interest_rate},
        )
        return PayoffDetails.unpayable(PayoffStatus.NON_PAYABLE, proposed_payment=payment)

    rows = build_amortization_schedule(debt, payment, start, max_months)
    if not rows or not is_paid_off(rows[-1].ending_balance):
        return PayoffDetails.unpayable(PayoffStatus.HORIZON_EXCEEDED, proposed_payment=payment)
    months = len(rows)
    return PayoffDetails(
        months=months,
        total_interest=ensure_precision(sum(row.interest for row in rows)),
        payoff_date=add_months(start, months),
        proposed_payment=payment,
    )


def calculate_payoff_details(
    debts: Iterable[DebtRecord | Debt],
    monthly_payment: float,
    strategy: Strategy | None = None,
    one_time_fundings: Iterable[OneTimeFunding] = (),
    start: date | None = None,
) -> dict[str, PayoffDetails]:
    """Per-debt payoff details under the accelerated plan, keyed by debt id."""

    result = calculate_scenario(
        debts,
        monthly_payment,
        one_time_fundings,
        is_accelerated=True,
        strategy=strategy,
        start=start,
    )
    return result.debts


def aggregate_payoff(
    debts: Iterable[DebtRecord | Debt],
    monthly_payment: float,
    strategy: Strategy | None = None,
    one_time_fundings: Iterable[OneTimeFunding] = (),
    start: date | None = None,
    *,
    accelerated: bool = True,
) -> PayoffDetails:
    """Whole-plan payoff details; ``accelerated=False`` gives the minimum-only baseline."""

    result = calculate_scenario(
        debts,
        monthly_payment,
        one_time_fundings,
        is_accelerated=accelerated,
        strategy=strategy,
        start=start,
    )
    return result.summary()


__all__ = [
    "aggregate_payoff",
    "calculate_payoff_details",
    "calculate_single_debt_payoff",
]
