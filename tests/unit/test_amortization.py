"""Unit tests for French-system amortization"""

import pytest
from credit_simulator.domain.amortization import (
    BALANCE_TOLERANCE,
    calculate_french_installment,
    generate_amortization_schedule,
    monthly_rate_from_annual,
)


def test_schedule_reference_example():
    """100000 at 2% over 12 periods"""
    schedule = generate_amortization_schedule(100_000, 0.02, 12)

    assert len(schedule) == 12
    first = schedule[0]
    assert first.period == 1
    assert first.installment == pytest.approx(9455.96, abs=0.01)
    assert first.interest == pytest.approx(2000.00, abs=0.01)
    assert first.principal == pytest.approx(7455.96, abs=0.01)
    assert first.balance == pytest.approx(92544.04, abs=0.01)
    assert schedule[-1].balance == 0
    assert schedule[-1].period == 12


@pytest.mark.parametrize(
    "principal,rate,periods",
    [
        (100_000, 0.02, 12),
        (2_500_000, 0.045, 240),
        (1_000, 0.001, 1),
        (50_000, 0.1, 36),
        (100_000, 1e-12, 12),
        (100_000, 1e-17, 12),
    ],
)
def test_schedule_invariants(principal, rate, periods):
    """Row count, principal sum, monotonic balance, zero at the end"""
    schedule = generate_amortization_schedule(principal, rate, periods)

    assert len(schedule) == periods
    assert sum(row.principal for row in schedule) == pytest.approx(principal, abs=0.01)
    balances = [row.balance for row in schedule]
    assert all(later <= earlier for earlier, later in zip(balances, balances[1:]))
    assert balances[-1] == 0
    assert all(b >= 0 for b in balances)
    assert len({row.installment for row in schedule}) == 1


@pytest.mark.parametrize("principal,rate,periods", [(0, 0.02, 12), (100_000, 0, 12), (100_000, 0.02, 0)])
def test_schedule_incomplete_input_is_empty(principal, rate, periods):
    """Missing inputs mean "not ready", not an error"""
    assert generate_amortization_schedule(principal, rate, periods) == []


def test_schedule_is_deterministic():
    assert generate_amortization_schedule(75_000, 0.03, 18) == generate_amortization_schedule(75_000, 0.03, 18)


def test_balance_tolerance_threshold():
    assert BALANCE_TOLERANCE == 0.01


def test_french_installment_zero_rate_is_straight_line():
    assert calculate_french_installment(12_000, 0, 12) == 1000


@pytest.mark.parametrize("rate", [1e-12, 1e-17])
def test_french_installment_tiny_rate_approaches_straight_line(rate):
    assert calculate_french_installment(12_000, rate, 12) == pytest.approx(1000)


def test_french_installment_no_periods():
    assert calculate_french_installment(12_000, 0.02, 0) == 0.0


def test_monthly_rate_from_annual_compounds_back():
    """Twelve monthly periods compound to the annual rate"""
    monthly = monthly_rate_from_annual(0.21)
    assert (1 + monthly) ** 12 == pytest.approx(1.21)
