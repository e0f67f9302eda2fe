"""Debt input records supplied by the surrounding application."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlmodel import Field, SQLModel


class DebtRecord(SQLModel):
    """Installment, revolving or special-purpose debt as entered by the user.

    The record is validated on construction and treated as read-only by the
    calculators; ``payoffsage.domain.debts.to_debt`` turns it into the variant
    the engine simulates.
    """

    id: str = Field(min_length=1, max_length=64)
    name: str = Field(default="", max_length=80)
    balance: float = Field(ge=0)
    interest_rate: float = Field(default=0.0, ge=0)
    minimum_payment: float = Field(default=0.0, ge=0)
    currency_symbol: str = Field(default="£", max_length=8)
    banker_name: Optional[str] = Field(default=None, max_length=80)
    category: Optional[str] = Field(default=None, max_length=40)
    next_payment_date: Optional[date] = None

    # Interest-included loans quote a balance that already carries future interest
    interest_included: bool = False
    remaining_months: Optional[int] = Field(default=None, ge=0)
    original_rate: Optional[float] = Field(default=None, ge=0)
    total_with_interest: Optional[float] = Field(default=None, ge=0)

    # Gold loans are interest-only with a balloon payment at maturity
    is_gold_loan: bool = False
    loan_term_months: Optional[int] = Field(default=None, ge=0)
    final_payment_date: Optional[date] = None
