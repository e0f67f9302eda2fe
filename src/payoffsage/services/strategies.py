"""Debt prioritization strategies (avalanche, snowball, custom)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, TypeVar

from ..domain.debts import StandardDebt

D = TypeVar("D", bound=StandardDebt)
Ordering = Callable[[Sequence[StandardDebt]], list[StandardDebt]]


@dataclass(frozen=True, slots=True)
class Strategy:
    """Named, stateless ordering of standard debts for extra payments."""

    id: str
    name: str
    description: str
    ordering: Ordering

    def calculate(self, debts: Iterable[D]) -> list[D]:
        """Return ``debts`` in payoff priority order; the input is not modified."""

        return self.ordering(list(debts))  # type: ignore[return-value]


def _avalanche(debts: Sequence[StandardDebt]) -> list[StandardDebt]:
    # Highest APR first, larger balance on a tie; sorted() is stable so input order decides the rest.
    return sorted(debts, key=lambda d: (-d.interest_rate, -d.balance))


def _snowball(debts: Sequence[StandardDebt]) -> list[StandardDebt]:
    return sorted(debts, key=lambda d: d.balance)


def _custom_ordering(order: Sequence[str]) -> Ordering:
    rank = {}
    for position, debt_id in enumerate(order):
        rank.setdefault(debt_id, position)

    def _ordering(debts: Sequence[StandardDebt]) -> list[StandardDebt]:
        listed = sorted((d for d in debts if d.id in rank), key=lambda d: rank[d.id])
        unlisted = [d for d in debts if d.id not in rank]
        return listed + unlisted

    return _ordering


AVALANCHE = Strategy(
    id="avalanche",
    name="Avalanche",
    description="Pay off debts with the highest interest rate first.",
    ordering=_avalanche,
)

SNOWBALL = Strategy(
    id="snowball",
    name="Snowball",
    description="Pay off the smallest balances first for quick wins.",
    ordering=_snowball,
)

STRATEGIES: tuple[Strategy, ...] = (AVALANCHE, SNOWBALL)


def custom_strategy(order: Sequence[str]) -> Strategy:
    """Build a strategy from an explicit list of debt ids.

    Listed debts come first in the given order; debts missing from ``order``
    follow in their input order and unknown ids are ignored.
    """

    return Strategy(
        id="custom",
        name="Custom",
        description="Pay off debts in a hand-picked order.",
        ordering=_custom_ordering(list(order)),
    )


def get_strategy(strategy_id: str, custom_order: Sequence[str] | None = None) -> Strategy:
    """Resolve a strategy id as stored on the profile."""

    key = (strategy_id or "").strip().lower()
    if key == "custom":
        return custom_strategy(custom_order or [])
    for strategy in STRATEGIES:
        if strategy.id == key:
            return strategy
    raise ValueError(f"Invalid debt payoff strategy: {strategy_id!r}")


__all__ = [
    "AVALANCHE",
    "SNOWBALL",
    "STRATEGIES",
    "Strategy",
    "custom_strategy",
    "get_strategy",
]
