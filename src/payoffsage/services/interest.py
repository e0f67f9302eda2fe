"""Interest helpers shared by every calculator.

All monetary values that flow back into a later month are passed through
``ensure_precision`` so that hundreds of simulated months do not accumulate
binary floating-point drift.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional

from ..domain.debts import Debt, GoldLoanDebt, InterestIncludedDebt

CENT = Decimal("0.01")
# Enough digits to quantize any finite float to cents.
QUANTIZE_PRECISION = 400


def ensure_precision(value: float) -> float:
    """Round a currency amount to cents using half-up rounding."""

    if not math.isfinite(value):
        return value
    with localcontext() as ctx:
        ctx.prec = QUANTIZE_PRECISION
        return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def monthly_interest(balance: float, annual_rate: float) -> float:
    """Return one month of interest on ``balance`` at ``annual_rate`` percent."""

    if annual_rate == 0 or balance <= 0:
        return 0.0
    return ensure_precision(balance * annual_rate / 1200)


def annuity_payment(principal: float, annual_rate: float, months: int) -> float:
    """Return the level monthly payment that retires ``principal`` in ``months``.

    payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)
    """

    if months <= 0:
        raise ValueError("Term must be positive")
    rate = annual_rate / 1200
    if rate == 0:
        return principal / months
    factor = (1 + rate) ** months
    return principal * (rate * factor) / (factor - 1)


def principal_from_total(
    total_with_interest: float,
    annual_rate: float,
    monthly_payment: float,
    months: int,
) -> Optional[float]:
    """Recover the principal behind a balance quoted inclusive of future interest.

    Inverts the annuity formula for the remaining ``months`` of ``monthly_payment``.
    The result never exceeds ``total_with_interest``. Returns ``None`` when the
    inputs cannot describe a loan (non-positive total, payment or term).
    """

    if months is None or months <= 0 or monthly_payment <= 0 or total_with_interest <= 0:
        return None
    rate = annual_rate / 1200
    if rate == 0:
        principal = monthly_payment * months
    else:
        principal = monthly_payment * (1 - (1 + rate) ** -months) / rate
    return ensure_precision(min(principal, total_with_interest))


def included_interest(debt: InterestIncludedDebt) -> Optional[float]:
    """Return the interest already built into an interest-included balance.

    The quoted total (``total_with_interest``, else the balance) is split back
    into principal by ``principal_from_total`` using the original rate when one
    was recorded. Returns ``None`` without a remaining term or payment.
    """

    total = debt.total_with_interest if debt.total_with_interest is not None else debt.balance
    rate = debt.original_rate if debt.original_rate is not None else debt.interest_rate
    principal = principal_from_total(total, rate, debt.minimum_payment, debt.remaining_months or 0)
    if principal is None:
        return None
    return ensure_precision(total - principal)


def estimate_interest_rate(
    principal: float,
    monthly_payment: float,
    months: int,
    *,
    max_rate: float = 1000.0,
) -> Optional[float]:
    """Back-solve the APR of a loan from its principal, payment and term.

    Returns the annual rate in percent rounded to two places, or ``None`` when
    no non-negative rate reproduces the payment.
    """

    if principal <= 0 or monthly_payment <= 0 or months <= 0:
        return None
    total_paid = monthly_payment * months
    if total_paid < principal - 0.005:
        return None
    if abs(total_paid - principal) <= 0.005:
        return 0.0

    low, high = 0.0, 100.0
    while annuity_payment(principal, high, months) < monthly_payment:
        high *= 2
        if high > max_rate:
            return None

    for _ in range(100):
        mid = (low + high) / 2
        if annuity_payment(principal, mid, months) < monthly_payment:
            low = mid
        else:
            high = mid
    return round((low + high) / 2, 2)


def is_debt_payable(debt: Debt) -> bool:
    """Return True when the minimum payment eventually retires the debt."""

    if isinstance(debt, GoldLoanDebt):
        return True
    if isinstance(debt, InterestIncludedDebt):
        return debt.minimum_payment > 0 or debt.balance <= 0
    if debt.balance <= 0:
        return True
    return debt.minimum_payment > monthly_interest(debt.balance, debt.interest_rate)


def minimum_viable_payment(debt: Debt) -> float:
    """Return the smallest whole payment that starts reducing the principal."""

    interest = monthly_interest(debt.balance, debt.interest_rate)
    if isinstance(debt, GoldLoanDebt):
        return interest
    return float(math.ceil(interest + 1))


__all__ = [
    "annuity_payment",
    "ensure_precision",
    "estimate_interest_rate",
    "included_interest",
    "is_debt_payable",
    "minimum_viable_payment",
    "monthly_interest",
    "principal_from_total",
]
