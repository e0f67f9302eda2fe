"""SQLModel record exports."""

from .debt import DebtRecord
from .funding import OneTimeFunding
from .profile import PayoffProfile

__all__ = [
    "DebtRecord",
    "OneTimeFunding",
    "PayoffProfile",
]
