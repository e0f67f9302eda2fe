"""Pytest configuration and shared fixtures for PayoffSage tests.

This module provides debt and funding factories plus helper utilities for
testing the payoff engine without touching real files or environment settings.
"""

from __future__ import annotations

import logging
from datetime import date

import pytest

from payoffsage.logging_config import ROOT_LOGGER_NAME
from payoffsage.models import DebtRecord, OneTimeFunding

# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point configuration at a temporary data directory for every test."""

    monkeypatch.setenv("PAYOFFSAGE_DATA_DIR", str(tmp_path / "instance"))
    for name in (
        "PAYOFFSAGE_DEV_MODE",
        "PAYOFFSAGE_MAX_MONTHS",
        "PAYOFFSAGE_DEFAULT_STRATEGY",
        "PAYOFFSAGE_CURRENCY_SYMBOL",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    # Close handlers opened by setup_logging so temporary log files can be removed
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def start() -> date:
    """Fixed simulation start so payoff dates are reproducible."""

    return date(2025, 1, 15)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def debt_factory():
    """Factory for creating debt records.

    Usage:
        debt = debt_factory(id="card", balance=500, interest_rate=20, minimum_payment=50)
    """

    counter = {"value": 0}

    def _create_debt(
        id: str | None = None,
        *,
        balance: float = 1000.0,
        interest_rate: float = 0.0,
        minimum_payment: float = 100.0,
        **kwargs,
    ) -> DebtRecord:
        counter["value"] += 1
        debt_id = id or f"debt-{counter['value']}"
        return DebtRecord(
            id=debt_id,
            name=kwargs.pop("name", debt_id.title()),
            balance=balance,
            interest_rate=interest_rate,
            minimum_payment=minimum_payment,
            **kwargs,
        )

    return _create_debt


@pytest.fixture
def funding_factory():
    """Factory for creating one-time fundings."""

    def _create_funding(payment_date: date, amount: float, notes: str | None = None) -> OneTimeFunding:
        return OneTimeFunding(payment_date=payment_date, amount=amount, notes=notes)

    return _create_funding


# =============================================================================
# Helpers
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (difference: {abs(actual - expected)})"
