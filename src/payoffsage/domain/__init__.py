"""Domain types for the payoff engine."""

from .debts import (
    Debt,
    GoldLoanDebt,
    InterestIncludedDebt,
    InvalidDebtError,
    InvalidGoldLoanError,
    StandardDebt,
    partition_debts,
    to_debt,
    to_debts,
)
from .payoff import PayoffDetails, PayoffStatus, RolloverEvent

__all__ = [
    "Debt",
    "GoldLoanDebt",
    "InterestIncludedDebt",
    "InvalidDebtError",
    "InvalidGoldLoanError",
    "PayoffDetails",
    "PayoffStatus",
    "RolloverEvent",
    "StandardDebt",
    "partition_debts",
    "to_debt",
    "to_debts",
]
