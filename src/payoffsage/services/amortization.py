"""Per-debt amortization ledgers for display and export."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..domain.debts import Debt, GoldLoanDebt, InterestIncludedDebt, to_debt
from ..models.debt import DebtRecord
from .interest import ensure_precision, monthly_interest
from .months import add_months, month_offset, schedule_start
from .payments import apply_payment, is_paid_off

logger = logging.getLogger(__name__)

MAX_MONTHS = 1200


@dataclass(frozen=True, slots=True)
class AmortizationEntry:
    """One month of a single debt's repayment."""

    month: int
    date: date
    starting_balance: float
    payment: float
    principal: float
    interest: float
    ending_balance: float


def calculate_gold_loan_schedule(
    debt: GoldLoanDebt,
    start: date | None = None,
    max_months: int = MAX_MONTHS,
) -> list[AmortizationEntry]:
    """Interest-only rows up to the maturity month, then a single balloon payment.

    A loan already past maturity is settled by a balloon in the first month.
    """

    start = schedule_start(debt.next_payment_date, start)
    maturity = max(month_offset(start, debt.final_payment_date), 0)
    balance = ensure_precision(debt.balance)
    rows: list[AmortizationEntry] = []

    for month in range(min(maturity + 1, max_months)):
        if is_paid_off(balance):
            break
        interest = monthly_interest(balance, debt.interest_rate)
        balloon = month >= maturity
        payment = ensure_precision(balance + interest) if balloon else interest
        ending = apply_payment(balance, payment, interest)
        rows.append(
            AmortizationEntry(
                month=month + 1,
                date=add_months(start, month),
                starting_balance=balance,
                payment=payment,
                principal=ensure_precision(payment - interest),
                interest=interest,
                ending_balance=ending,
            )
        )
        balance = ending
    return rows


def _linear_schedule(
    debt: InterestIncludedDebt, payment: float, start: date, max_months: int
) -> list[AmortizationEntry]:
    balance = ensure_precision(debt.balance)
    rows: list[AmortizationEntry] = []
    if payment <= 0:
        return rows
    for month in range(max_months):
        if is_paid_off(balance):
            break
        paid = min(payment, balance)
        ending = apply_payment(balance, paid)
        if is_paid_off(ending):
            ending = 0.0
        rows.append(
            AmortizationEntry(
                month=month + 1,
                date=add_months(start, month),
                starting_balance=balance,
                payment=paid,
                principal=paid,
                interest=0.0,
                ending_balance=ending,
            )
        )
        balance = ending
    return rows


def build_amortization_schedule(
    debt: DebtRecord | Debt,
    monthly_payment: Optional[float] = None,
    start: date | None = None,
    max_months: int = MAX_MONTHS,
) -> list[AmortizationEntry]:
    """Build a month-by-month ledger for one debt paid at a fixed amount.

    ``monthly_payment`` defaults to the debt's minimum payment. A standard debt
    whose payment never exceeds its monthly interest yields no rows; rows stop
    at ``max_months`` otherwise.
    """

    debt = to_debt(debt)
    start = schedule_start(debt.next_payment_date, start)
    if isinstance(debt, GoldLoanDebt):
        return calculate_gold_loan_schedule(debt, start, max_months)

    payment = debt.minimum_payment if monthly_payment is None else float(monthly_payment)
    if isinstance(debt, InterestIncludedDebt):
        return _linear_schedule(debt, payment, start, max_months)

    balance = ensure_precision(debt.balance)
    if not is_paid_off(balance) and payment <= monthly_interest(balance, debt.interest_rate):
        logger.debug(
            "Payment does not cover interest; no schedule",
            extra={"debt_id": debt.id, "payment": payment},
        )
        return []

    rows: list[AmortizationEntry] = []
    for month in range(max_months):
        if is_paid_off(balance):
            break
        interest = monthly_interest(balance, debt.interest_rate)
        paid = min(payment, ensure_precision(balance + interest))
        ending = apply_payment(balance, paid, interest)
        if is_paid_off(ending):
            # Sub-cent residue goes into the final payment
            paid = ensure_precision(paid + ending)
            ending = 0.0
        rows.append(
            AmortizationEntry(
                month=month + 1,
                date=add_months(start, month),
                starting_balance=balance,
                payment=paid,
                principal=ensure_precision(paid - interest),
                interest=interest,
                ending_balance=ending,
            )
        )
        balance = ending
    return rows


def schedule_totals(rows: list[AmortizationEntry]) -> dict[str, float]:
    """Return total paid, total interest and principal repaid for a ledger."""

    return {
        "total_paid": ensure_precision(sum(row.payment for row in rows)),
        "total_interest": ensure_precision(sum(row.interest for row in rows)),
        "principal_paid": ensure_precision(sum(row.principal for row in rows)),
    }


__all__ = [
    "AmortizationEntry",
    "build_amortization_schedule",
    "calculate_gold_loan_schedule",
    "schedule_totals",
]
