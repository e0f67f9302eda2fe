"""PayoffSage debt payoff simulation package."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .domain import InvalidDebtError, InvalidGoldLoanError, PayoffDetails, PayoffStatus
from .models import DebtRecord, OneTimeFunding, PayoffProfile
from .services.amortization import build_amortization_schedule
from .services.payoff import calculate_single_debt_payoff
from .services.scenario import calculate_scenario
from .services.scoring import calculate_debt_score
from .services.strategies import get_strategy
from .services.timeline import calculate_timeline, calculate_timeline_data

__all__ = [
    "BaseConfig",
    "DebtRecord",
    "DevConfig",
    "InvalidDebtError",
    "InvalidGoldLoanError",
    "OneTimeFunding",
    "PayoffDetails",
    "PayoffProfile",
    "PayoffStatus",
    "build_amortization_schedule",
    "calculate_debt_score",
    "calculate_scenario",
    "calculate_single_debt_payoff",
    "calculate_timeline",
    "calculate_timeline_data",
    "get_strategy",
]
