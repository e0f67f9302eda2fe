"""Payoff preferences normally stored on the user profile."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field, SQLModel


class PayoffProfile(SQLModel):
    """Explicit carrier for the budget, strategy and currency a plan runs with."""

    monthly_payment: Optional[float] = Field(default=None, ge=0)
    selected_strategy: str = Field(default="avalanche", max_length=32)
    preferred_currency: str = Field(default="£", max_length=8)

    def effective_payment(self, minimum_payment_total: float) -> float:
        """Return the budget to simulate with, falling back to the minimums."""

        if self.monthly_payment is None or self.monthly_payment <= 0:
            return minimum_payment_total
        return self.monthly_payment
