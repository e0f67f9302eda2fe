"""One-time lump-sum payments injected into the payoff plan."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlmodel import Field, SQLModel


class OneTimeFunding(SQLModel):
    """A lump sum available in the calendar month of ``payment_date``."""

    id: Optional[str] = Field(default=None, max_length=64)
    payment_date: date
    amount: float = Field(ge=0)
    notes: Optional[str] = Field(default=None, max_length=255)
