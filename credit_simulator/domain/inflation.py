"""UVA (inflation-indexed) payment projection"""

from typing import List
from credit_simulator.domain.models import UVAProjection


def project_uva_payments(
    initial_payment: float,
    annual_inflation: float,
    periods: int,
    income: float,
) -> List[UVAProjection]:
    """
    Project how an indexed payment grows under constant inflation.

    The annual rate (percent) is spread linearly over 12 months and
    compounded per period: payment_k = initial * (1 + m)^(k-1).
    Income stays fixed, so the income share rises with the payment.
    """
    monthly_inflation = annual_inflation / 100 / 12
    projection = []

    for period in range(1, periods + 1):
        payment = initial_payment * (1 + monthly_inflation) ** (period - 1)
        income_percentage = payment / income * 100 if income else 0.0
        projection.append(
            UVAProjection(period=period, payment=payment, income_percentage=income_percentage)
        )

    return projection
