"""Debt variants simulated by the payoff engine.

Records coming from the application are flattened: a couple of flags and a
handful of optional metadata columns decide how a debt behaves. The engine
works on explicit variants instead so every branch of the simulation can be
dispatched on type:

* ``StandardDebt`` amortizes with monthly compound interest;
* ``GoldLoanDebt`` is interest-only and repaid by a balloon at maturity;
* ``InterestIncludedDebt`` quotes a balance that already contains all future
  interest and is paid down linearly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Union

from ..models.debt import DebtRecord


class InvalidDebtError(ValueError):
    """Raised when a debt record cannot be simulated as entered."""


class InvalidGoldLoanError(InvalidDebtError):
    """Raised when a gold loan is missing its term or maturity date."""


@dataclass(frozen=True, slots=True)
class StandardDebt:
    """Compound-interest debt serviced by minimum and strategy-directed payments."""

    id: str
    name: str
    balance: float
    interest_rate: float
    minimum_payment: float
    next_payment_date: Optional[date] = None


@dataclass(frozen=True, slots=True)
class GoldLoanDebt:
    """Interest-only loan whose principal falls due on ``final_payment_date``."""

    id: str
    name: str
    balance: float
    interest_rate: float
    minimum_payment: float
    loan_term_months: int
    final_payment_date: date
    next_payment_date: Optional[date] = None


@dataclass(frozen=True, slots=True)
class InterestIncludedDebt:
    """Loan quoted inclusive of future interest; no further interest accrues."""

    id: str
    name: str
    balance: float
    interest_rate: float
    minimum_payment: float
    remaining_months: Optional[int] = None
    original_rate: Optional[float] = None
    total_with_interest: Optional[float] = None
    next_payment_date: Optional[date] = None


Debt = Union[StandardDebt, GoldLoanDebt, InterestIncludedDebt]
DEBT_TYPES = (StandardDebt, GoldLoanDebt, InterestIncludedDebt)


def validate_gold_loan(record: DebtRecord) -> bool:
    """Return True when a gold-loan record carries a usable term and maturity date."""

    if not record.is_gold_loan:
        return True
    return bool(record.loan_term_months and record.loan_term_months > 0) and (
        record.final_payment_date is not None
    )


def to_debt(record: DebtRecord | Debt) -> Debt:
    """Convert an input record to its simulation variant.

    Variants pass through unchanged so callers may mix both kinds.
    """

    if isinstance(record, DEBT_TYPES):
        return record
    label = record.name or record.id

    if record.interest_included and record.is_gold_loan:
        raise InvalidDebtError(
            f"Debt {label!r} cannot be both a gold loan and an interest-included loan."
        )

    if record.is_gold_loan:
        if not validate_gold_loan(record):
            raise InvalidGoldLoanError(f"Invalid gold loan configuration for debt: {label}")
        return GoldLoanDebt(
            id=record.id,
            name=record.name,
            balance=float(record.balance),
            interest_rate=float(record.interest_rate),
            minimum_payment=float(record.minimum_payment),
            loan_term_months=int(record.loan_term_months or 0),
            final_payment_date=record.final_payment_date,  # type: ignore[arg-type]
            next_payment_date=record.next_payment_date,
        )

    if record.interest_included:
        return InterestIncludedDebt(
            id=record.id,
            name=record.name,
            balance=float(record.balance),
            interest_rate=float(record.interest_rate),
            minimum_payment=float(record.minimum_payment),
            remaining_months=record.remaining_months,
            original_rate=record.original_rate,
            total_with_interest=record.total_with_interest,
            next_payment_date=record.next_payment_date,
        )

    return StandardDebt(
        id=record.id,
        name=record.name,
        balance=float(record.balance),
        interest_rate=float(record.interest_rate),
        minimum_payment=float(record.minimum_payment),
        next_payment_date=record.next_payment_date,
    )


def to_debts(records: Iterable[DebtRecord | Debt]) -> list[Debt]:
    """Convert a collection of records, rejecting duplicate ids."""

    debts: list[Debt] = []
    seen: set[str] = set()
    for record in records:
        debt = to_debt(record)
        if debt.id in seen:
            raise InvalidDebtError(f"Duplicate debt id: {debt.id}")
        seen.add(debt.id)
        debts.append(debt)
    return debts


def partition_debts(
    debts: Iterable[Debt],
) -> tuple[list[GoldLoanDebt], list[InterestIncludedDebt], list[StandardDebt]]:
    """Split debts into (gold loans, interest-included loans, standard loans)."""

    gold: list[GoldLoanDebt] = []
    included: list[InterestIncludedDebt] = []
    standard: list[StandardDebt] = []
    for debt in debts:
        if isinstance(debt, GoldLoanDebt):
            gold.append(debt)
        elif isinstance(debt, InterestIncludedDebt):
            included.append(debt)
        else:
            standard.append(debt)
    return gold, included, standard


__all__ = [
    "Debt",
    "GoldLoanDebt",
    "InterestIncludedDebt",
    "InvalidDebtError",
    "InvalidGoldLoanError",
    "StandardDebt",
    "partition_debts",
    "to_debt",
    "to_debts",
    "validate_gold_loan",
]
