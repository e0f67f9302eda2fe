"""Composite debt score comparing a minimum-only plan with the optimized plan."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..domain.payoff import PayoffDetails
from ..models.funding import OneTimeFunding
from .interest import ensure_precision

logger = logging.getLogger(__name__)

INTEREST_WEIGHT = 50.0
DURATION_WEIGHT = 30.0
ABOVE_MINIMUM_POINTS = 5.0
EXTRA_RATIO_POINTS = 7.5
STRATEGY_POINTS = 5.0
LUMP_SUM_POINTS = 0.5
LUMP_SUM_CAP = 2.5

NAMED_STRATEGIES = {"avalanche", "snowball"}

# Lower bound of each category, highest first
SCORE_CATEGORIES = (
    (80.0, "Excellent"),
    (60.0, "Good"),
    (40.0, "Fair"),
    (0.0, "Needs Improvement"),
)


@dataclass(slots=True)
class BehaviorScore:
    excess_payments: float
    strategy_usage: float
    lump_sums: float

    @property
    def total(self) -> float:
        return round(self.excess_payments + self.strategy_usage + self.lump_sums, 2)


@dataclass(slots=True)
class DebtScore:
    """Score breakdown; ``total`` ranges from 0 to 100."""

    interest_score: float
    duration_score: float
    behavior: BehaviorScore
    category: str

    @property
    def behavior_score(self) -> float:
        return self.behavior.total

    @property
    def total(self) -> float:
        return round(self.interest_score + self.duration_score + self.behavior.total, 2)


def _share(saved: float, baseline: float) -> float:
    if baseline <= 0:
        return 1.0
    return min(max(saved / baseline, 0.0), 1.0)


def _savings_scores(baseline: PayoffDetails, optimized: PayoffDetails) -> tuple[float, float]:
    if not optimized.is_payable:
        return 0.0, 0.0
    if not baseline.is_payable:
        # The optimized plan retires debt the minimums never would
        return INTEREST_WEIGHT, DURATION_WEIGHT

    interest_share = _share(
        baseline.total_interest - optimized.total_interest, baseline.total_interest
    )
    duration_share = _share(baseline.months - optimized.months, baseline.months)
    return round(interest_share * INTEREST_WEIGHT, 2), round(duration_share * DURATION_WEIGHT, 2)


def _behavior_score(
    monthly_payment: float,
    minimum_payment_total: float,
    strategy_id: Optional[str],
    fundings: list[OneTimeFunding],
) -> BehaviorScore:
    excess = 0.0
    extra = ensure_precision(monthly_payment - minimum_payment_total)
    if extra > 0:
        excess += ABOVE_MINIMUM_POINTS
        if minimum_payment_total > 0:
            excess += min(extra / minimum_payment_total, 1.0) * EXTRA_RATIO_POINTS
        else:
            excess += EXTRA_RATIO_POINTS

    strategy_usage = STRATEGY_POINTS if (strategy_id or "").lower() in NAMED_STRATEGIES else 0.0
    lump_sums = min(
        LUMP_SUM_POINTS * sum(1 for funding in fundings if funding.amount > 0), LUMP_SUM_CAP
    )
    return BehaviorScore(
        excess_payments=round(excess, 2),
        strategy_usage=strategy_usage,
        lump_sums=lump_sums,
    )


def get_score_category(score: float) -> str:
    """Bucket a total score into a qualitative label."""

    for threshold, label in SCORE_CATEGORIES:
        if score >= threshold:
            return label
    return SCORE_CATEGORIES[-1][1]


def calculate_debt_score(
    baseline: PayoffDetails,
    optimized: PayoffDetails,
    *,
    monthly_payment: float,
    minimum_payment_total: float,
    strategy_id: Optional[str] = None,
    one_time_fundings: Iterable[OneTimeFunding] = (),
) -> DebtScore:
    """Score how much the optimized plan improves on paying minimums only.

    Interest saved is worth up to 50 points, months saved up to 30 and payment
    behavior up to 20.
    """

    interest_score, duration_score = _savings_scores(baseline, optimized)
    behavior = _behavior_score(
        monthly_payment, minimum_payment_total, strategy_id, list(one_time_fundings)
    )
    total = round(interest_score + duration_score + behavior.total, 2)
    score = DebtScore(
        interest_score=interest_score,
        duration_score=duration_score,
        behavior=behavior,
        category=get_score_category(total),
    )
    logger.debug(
        "Debt score calculated",
        extra={"total": score.total, "category": score.category},
    )
    return score


__all__ = [
    "BehaviorScore",
    "DebtScore",
    "SCORE_CATEGORIES",
    "calculate_debt_score",
    "get_score_category",
]
