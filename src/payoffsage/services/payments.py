"""Payment application and payoff detection."""

from __future__ import annotations

from .interest import ensure_precision

PAID_OFF_THRESHOLD = 0.01


def apply_payment(balance: float, payment: float, interest: float = 0.0) -> float:
    """Return the balance left after accruing ``interest`` and paying ``payment``."""

    return max(0.0, ensure_precision(balance + interest - payment))


def is_paid_off(balance: float, threshold: float = PAID_OFF_THRESHOLD) -> bool:
    """Treat sub-cent residue as fully repaid."""

    return balance <= threshold


__all__ = ["PAID_OFF_THRESHOLD", "apply_payment", "is_paid_off"]
