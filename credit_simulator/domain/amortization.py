"""French-system amortization schedules"""

import math
from typing import List
from credit_simulator.domain.models import AmortizationRow

# Terminal balances below this are rounding residue, not debt
BALANCE_TOLERANCE = 0.01


def calculate_french_installment(principal: float, periodic_rate: float, periods: int) -> float:
    """
    Fixed installment that repays `principal` over `periods` at `periodic_rate`.

    A zero rate degenerates to straight-line repayment.
    """
    if periods <= 0:
        return 0.0
    if periodic_rate == 0:
        return principal / periods
    # (1+r)^n - 1 via log1p/expm1 so tiny rates keep their precision
    growth = math.expm1(periods * math.log1p(periodic_rate))
    if growth == 0:
        return principal / periods
    return (principal * periodic_rate * (growth + 1)) / growth


def monthly_rate_from_annual(effective_annual_rate: float) -> float:
    """Equivalent monthly rate for an effective annual rate (0.21 for 21%)"""
    return math.pow(1 + effective_annual_rate, 1 / 12) - 1


def generate_amortization_schedule(
    principal: float,
    periodic_rate: float,
    periods: int,
) -> List[AmortizationRow]:
    """
    Build a fixed-payment ("French system") amortization schedule.

    Requirements:
    - Exactly `periods` rows, 1-based
    - Constant installment; interest on the running balance, the rest is principal
    - Final balance under BALANCE_TOLERANCE is clamped to zero
    - Reported balances never go negative

    Returns an empty list while any input is still missing (zero), which
    callers treat as "not ready to compute".

    Example:
        100000 at 2% over 12 periods → installment 9455.96,
        first row: interest 2000.00, principal 7455.96, balance 92544.04
    """
    if not principal or not periodic_rate or not periods:
        return []

    installment = calculate_french_installment(principal, periodic_rate, periods)
    balance = principal
    schedule = []

    for period in range(1, periods + 1):
        interest = balance * periodic_rate
        principal_paid = installment - interest
        balance -= principal_paid

        if period == periods and abs(balance) < BALANCE_TOLERANCE:
            balance = 0.0

        schedule.append(
            AmortizationRow(
                period=period,
                installment=installment,
                principal=principal_paid,
                interest=interest,
                balance=max(0.0, balance),
            )
        )

    return schedule
