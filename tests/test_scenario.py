"""Tests for the month-by-month payoff simulation.

These tests verify:
- Baseline (minimum payments only) and accelerated scenarios
- Extra payments applied in strategy order
- Released minimum payments rolling over to remaining debts
- One-time fundings matched by calendar month
- Gold loans, interest-included loans and non-payable detection
- The simulation horizon
"""

from __future__ import annotations

from datetime import date

import pytest

from payoffsage.domain.payoff import PayoffStatus, RolloverEvent
from payoffsage.services.scenario import (
    ScenarioSimulator,
    calculate_scenario,
    fundings_by_month,
)
from payoffsage.services.strategies import AVALANCHE, SNOWBALL, custom_strategy
from tests.conftest import assert_float_equal


@pytest.fixture
def two_debts(debt_factory):
    return [
        debt_factory("a", balance=500.0, interest_rate=20.0, minimum_payment=50.0),
        debt_factory("b", balance=1000.0, interest_rate=10.0, minimum_payment=30.0),
    ]


class TestSingleDebt:
    """Single-debt scenarios with known answers."""

    def test_zero_interest_pays_off_in_twelve_months(self, debt_factory, start):
        debt = debt_factory("loan", balance=1200.0, interest_rate=0.0, minimum_payment=100.0)

        result = calculate_scenario([debt], 100.0, start=start)

        assert result.status is PayoffStatus.PAID_OFF
        assert result.months == 12
        assert result.total_interest == 0.0
        assert result.payoff_date == date(2026, 1, 15)

    def test_baseline_matches_for_zero_interest(self, debt_factory, start):
        debt = debt_factory("loan", balance=1200.0, interest_rate=0.0, minimum_payment=100.0)

        result = calculate_scenario([debt], 0.0, is_accelerated=False, start=start)

        assert result.months == 12
        assert result.total_interest == 0.0

    def test_payment_equal_to_interest_is_non_payable(self, debt_factory, start):
        debt = debt_factory("card", balance=1000.0, interest_rate=24.0, minimum_payment=20.0)

        baseline = calculate_scenario([debt], 20.0, is_accelerated=False, start=start)
        accelerated = calculate_scenario([debt], 20.0, start=start)

        for result in (baseline, accelerated):
            assert result.status is PayoffStatus.NON_PAYABLE
            assert result.months is None
            assert result.total_interest is None
            assert result.payoff_date is None
        assert baseline.non_payable_ids == ["card"]
        # Stall detection stops well before the horizon
        assert accelerated.months_simulated < 5

    def test_larger_budget_retires_the_same_debt(self, debt_factory, start):
        debt = debt_factory("card", balance=1000.0, interest_rate=24.0, minimum_payment=20.0)

        result = calculate_scenario([debt], 100.0, start=start)

        assert result.status is PayoffStatus.PAID_OFF
        assert result.total_interest > 0

    def test_interest_included_loan_is_linear(self, debt_factory, start):
        debt = debt_factory(
            "phone", balance=900.0, interest_rate=15.0, minimum_payment=100.0, interest_included=True
        )

        result = calculate_scenario([debt], 100.0, start=start)

        assert result.months == 9
        assert result.total_interest == 0.0


class TestExtraPayments:
    """Tests for strategy-directed extra payments."""

    def test_avalanche_sends_first_month_extra_to_highest_rate(self, two_debts, start):
        simulator = ScenarioSimulator(two_debts, monthly_payment=150.0, strategy=AVALANCHE, start=start)

        outcome = simulator.step()

        assert outcome.extra_available == 70.0
        assert outcome.allocations["a"].extra_paid == 70.0
        assert outcome.allocations["b"].extra_paid == 0.0
        assert_float_equal(outcome.allocations["a"].ending_balance, 388.33)
        assert_float_equal(outcome.allocations["b"].ending_balance, 978.33)

    def test_custom_order_redirects_extra(self, two_debts, start):
        simulator = ScenarioSimulator(
            two_debts, monthly_payment=150.0, strategy=custom_strategy(["b", "a"]), start=start
        )

        outcome = simulator.step()

        assert outcome.allocations["b"].extra_paid == 70.0
        assert outcome.allocations["a"].extra_paid == 0.0

    def test_extra_spills_to_next_debt_in_the_same_month(self, debt_factory, start):
        debts = [
            debt_factory("small", balance=100.0, minimum_payment=10.0),
            debt_factory("large", balance=1000.0, minimum_payment=10.0),
        ]
        simulator = ScenarioSimulator(debts, monthly_payment=300.0, strategy=SNOWBALL, start=start)

        outcome = simulator.step()

        assert outcome.allocations["small"].extra_paid == 90.0
        assert outcome.allocations["large"].extra_paid == 190.0
        assert outcome.retired == ["small"]

    def test_first_month_payments_reported(self, two_debts, start):
        result = calculate_scenario(two_debts, 150.0, start=start)

        assert result.payments == {"a": 120.0, "b": 30.0}
        assert result.debts["a"].proposed_payment == 120.0

    def test_accelerated_beats_baseline(self, two_debts, start):
        baseline = calculate_scenario(two_debts, 150.0, is_accelerated=False, start=start)
        accelerated = calculate_scenario(two_debts, 150.0, start=start)

        assert accelerated.months < baseline.months
        assert accelerated.total_interest < baseline.total_interest


class TestRollover:
    """Released minimum payments join the pool from the following month."""

    @pytest.fixture
    def debts(self, debt_factory):
        return [
            debt_factory("a", balance=100.0, minimum_payment=50.0),
            debt_factory("b", balance=1000.0, minimum_payment=50.0),
        ]

    def test_released_payment_grows_by_the_minimum(self, debts, start):
        simulator = ScenarioSimulator(debts, monthly_payment=100.0, strategy=SNOWBALL, start=start)

        outcomes = [simulator.step() for _ in range(3)]

        assert outcomes[1].retired == ["a"]
        assert outcomes[1].rollover == 0.0
        assert outcomes[2].rollover - outcomes[1].rollover == 50.0
        assert outcomes[2].extra_available - outcomes[1].extra_available == 50.0
        assert outcomes[2].allocations["b"].total_paid == 100.0

    def test_rollover_events_recorded(self, debts, start):
        result = calculate_scenario(debts, 100.0, strategy=SNOWBALL, start=start)

        assert result.rollovers[0] == RolloverEvent(from_debt_id="a", amount=50.0, month=1)
        assert result.debts["b"].redistribution_history == [result.rollovers[0]]
        assert result.debts["a"].months == 2
        assert result.debts["b"].months == 11
        assert result.months == 11

    def test_budget_is_conserved(self, debts, start):
        simulator = ScenarioSimulator(debts, monthly_payment=100.0, strategy=SNOWBALL, start=start)

        for _ in range(10):
            outcome = simulator.step()
            paid = sum(allocation.total_paid for allocation in outcome.allocations.values())
            assert paid <= 100.0 + 1e-9

    def test_baseline_does_not_roll_over(self, debts, start):
        result = calculate_scenario(debts, 100.0, is_accelerated=False, start=start)

        assert result.rollovers == []
        assert result.months == 20


class TestFundings:
    """One-time fundings are matched by calendar month."""

    def test_same_month_fundings_are_summed(self, funding_factory, start):
        fundings = [
            funding_factory(date(2025, 3, 1), 200.0),
            funding_factory(date(2025, 3, 28), 300.0),
            funding_factory(date(2024, 12, 1), 999.0),
        ]

        assert fundings_by_month(fundings, start) == {2: 500.0}

    def test_funding_shortens_the_plan(self, debt_factory, funding_factory, start):
        debt = debt_factory("loan", balance=1000.0, minimum_payment=100.0)
        funding = funding_factory(date(2025, 3, 1), 500.0)

        result = calculate_scenario([debt], 100.0, [funding], start=start)
        baseline = calculate_scenario([debt], 100.0, [funding], is_accelerated=False, start=start)

        assert result.months == 5
        assert baseline.months == 10

    def test_funding_before_start_is_ignored(self, debt_factory, funding_factory, start):
        debt = debt_factory("loan", balance=1000.0, minimum_payment=100.0)
        funding = funding_factory(date(2024, 12, 1), 500.0)

        result = calculate_scenario([debt], 100.0, [funding], start=start)

        assert result.months == 10

    def test_later_funding_rescues_a_stalled_plan(self, debt_factory, funding_factory, start):
        debt = debt_factory("card", balance=1000.0, interest_rate=24.0, minimum_payment=20.0)
        funding = funding_factory(date(2025, 4, 10), 2000.0)

        result = calculate_scenario([debt], 20.0, [funding], start=start)

        assert result.status is PayoffStatus.PAID_OFF
        assert result.months == 4
        assert_float_equal(result.total_interest, 80.0)


class TestGoldLoans:
    """Interest-only loans repaid by a balloon at maturity."""

    @pytest.fixture
    def gold(self, debt_factory):
        return debt_factory(
            "gold",
            balance=1000.0,
            interest_rate=12.0,
            minimum_payment=0.0,
            is_gold_loan=True,
            loan_term_months=3,
            final_payment_date=date(2025, 4, 15),
        )

    def test_balloon_paid_in_maturity_month(self, gold, start):
        simulator = ScenarioSimulator([gold], monthly_payment=2000.0, start=start)

        outcomes = [simulator.step() for _ in range(4)]

        assert [o.allocations["gold"].minimum_paid for o in outcomes] == [10.0, 10.0, 10.0, 1010.0]
        assert outcomes[-1].retired == ["gold"]
        assert simulator.finished

    def test_gold_loan_totals(self, gold, start):
        for accelerated in (True, False):
            result = calculate_scenario([gold], 2000.0, is_accelerated=accelerated, start=start)
            assert result.months == 4
            assert result.total_interest == 40.0

    def test_gold_loans_receive_no_extra(self, gold, debt_factory, start):
        card = debt_factory("card", balance=500.0, minimum_payment=50.0)
        simulator = ScenarioSimulator([gold, card], monthly_payment=200.0, start=start)

        outcome = simulator.step()

        assert outcome.allocations["gold"].extra_paid == 0.0
        assert outcome.allocations["card"].extra_paid == 140.0

    def test_balloon_beyond_budget_is_flagged(self, gold, start):
        result = calculate_scenario([gold], 10.0, start=start)

        assert result.status is PayoffStatus.PAID_OFF
        assert result.shortfall_months == [3]


class TestNonPayable:
    def test_baseline_reports_the_offending_debt(self, debt_factory, start):
        debts = [
            debt_factory("bad", balance=1000.0, interest_rate=24.0, minimum_payment=20.0),
            debt_factory("good", balance=100.0, minimum_payment=50.0),
        ]

        result = calculate_scenario(debts, 70.0, is_accelerated=False, start=start)

        assert result.status is PayoffStatus.NON_PAYABLE
        assert result.non_payable_ids == ["bad"]
        assert result.debts["good"].months == 2
        assert result.debts["bad"].status is PayoffStatus.NON_PAYABLE
        assert result.debts["bad"].months is None

    @pytest.fixture
    def payday_and_gold(self, debt_factory):
        return [
            debt_factory("payday", balance=500.0, interest_rate=390.0, minimum_payment=10.0),
            debt_factory(
                "gold",
                balance=2000.0,
                interest_rate=12.0,
                minimum_payment=0.0,
                is_gold_loan=True,
                loan_term_months=240,
                final_payment_date=date(2045, 1, 1),
            ),
        ]

    @pytest.mark.parametrize("accelerated", [False, True])
    def test_runaway_debt_beside_a_gold_loan_is_frozen(self, payday_and_gold, start, accelerated):
        """A debt that can never be retired stops compounding while a gold loan runs on."""
        simulator = ScenarioSimulator(payday_and_gold, monthly_payment=40.0, accelerated=accelerated, start=start)

        while not simulator.settled and simulator.month < simulator.max_months:
            simulator.step()
        result = simulator.result()

        assert result.status is PayoffStatus.NON_PAYABLE
        assert result.non_payable_ids == ["payday"]
        assert simulator.balances["payday"] == 500.0
        assert simulator.interest_by_debt["payday"] == 0.0
        assert result.debts["gold"].months == 241
        assert result.debts["payday"].status is PayoffStatus.NON_PAYABLE

    @pytest.mark.parametrize("accelerated", [False, True])
    def test_runaway_debt_beside_a_gold_loan_does_not_raise(self, payday_and_gold, start, accelerated):
        result = calculate_scenario(payday_and_gold, 40.0, is_accelerated=accelerated, start=start)

        assert result.status is PayoffStatus.NON_PAYABLE
        assert result.months is None

    def test_plan_flags_debt_whose_interest_outgrows_the_budget(self, debt_factory, start):
        debts = [
            debt_factory("card", balance=5000.0, interest_rate=60.0, minimum_payment=20.0),
            debt_factory("loan", balance=300.0, minimum_payment=50.0),
        ]

        result = calculate_scenario(debts, 100.0, start=start)

        assert result.status is PayoffStatus.NON_PAYABLE
        assert result.non_payable_ids == ["card"]
        assert result.debts["loan"].months == 3

    def test_plan_keeps_debt_that_rollover_can_rescue(self, debt_factory, start):
        """Early growth alone does not flag a debt the full budget can still retire."""
        debts = [
            debt_factory("a", balance=1000.0, interest_rate=24.0, minimum_payment=10.0),
            debt_factory("b", balance=100.0, minimum_payment=90.0),
        ]

        accelerated = calculate_scenario(debts, 100.0, strategy=SNOWBALL, start=start)
        baseline = calculate_scenario(debts, 100.0, is_accelerated=False, start=start)

        assert accelerated.status is PayoffStatus.PAID_OFF
        assert accelerated.non_payable_ids == []
        assert baseline.status is PayoffStatus.NON_PAYABLE
        assert baseline.non_payable_ids == ["a"]

    def test_zero_minimum_without_budget_stalls(self, debt_factory, start):
        debt = debt_factory("loan", balance=500.0, minimum_payment=0.0)

        result = calculate_scenario([debt], 0.0, start=start)

        assert result.status is PayoffStatus.NON_PAYABLE


class TestHorizonAndShortfall:
    def test_horizon_reported_instead_of_a_date(self, debt_factory, start):
        debt = debt_factory("loan", balance=1200.0, minimum_payment=50.0)

        result = calculate_scenario([debt], 50.0, start=start, max_months=12)

        assert result.status is PayoffStatus.HORIZON_EXCEEDED
        assert result.months is None
        assert result.payoff_date is None
        assert result.months_simulated == 12

    def test_minimums_are_paid_even_above_budget(self, debt_factory, start):
        debt = debt_factory("loan", balance=1000.0, minimum_payment=100.0)

        result = calculate_scenario([debt], 50.0, start=start)

        assert result.months == 10
        assert result.shortfall_months == list(range(10))


class TestPurity:
    def test_no_debts_is_already_paid_off(self, start):
        result = calculate_scenario([], 100.0, start=start)

        assert result.status is PayoffStatus.PAID_OFF
        assert result.months == 0
        assert result.payoff_date == start

    def test_inputs_not_mutated(self, two_debts, start):
        before = [debt.model_dump() for debt in two_debts]

        calculate_scenario(two_debts, 150.0, start=start)

        assert [debt.model_dump() for debt in two_debts] == before

    def test_identical_inputs_identical_results(self, two_debts, funding_factory, start):
        fundings = [funding_factory(date(2025, 6, 1), 250.0)]

        first = calculate_scenario(two_debts, 150.0, fundings, start=start)
        second = calculate_scenario(two_debts, 150.0, fundings, start=start)

        assert first == second
