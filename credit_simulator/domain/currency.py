"""Currency conversion and multi-currency consolidation (ARS/USD)"""

import math
from typing import Dict, Optional
from credit_simulator.domain.models import ConversionResult
from credit_simulator.domain.exceptions import InvalidExchangeRateError

LOCAL_CURRENCY = "ARS"
REFERENCE_CURRENCY = "USD"

# Fallback rate (1 USD = X ARS) for consolidated reports when none is supplied
DEFAULT_EXCHANGE_RATE = 1450.0

# Share of gross yield kept after estimated operating expenses
CAP_RATE_FACTOR = 0.85


def convert_currency(amount: float, from_currency: str, to_currency: str, exchange_rate: float) -> float:
    """
    Convert between ARS and USD with a rate quoted as 1 USD = X ARS.

    ARS → USD divides, USD → ARS multiplies. Unsupported pairs pass through.
    """
    if from_currency == to_currency:
        return amount

    if from_currency == LOCAL_CURRENCY and to_currency == REFERENCE_CURRENCY:
        return amount / exchange_rate
    if from_currency == REFERENCE_CURRENCY and to_currency == LOCAL_CURRENCY:
        return amount * exchange_rate

    return amount


def convert_payment(
    amount: float,
    payment_currency: str,
    contract_currency: str,
    exchange_rate: Optional[float] = None,
) -> ConversionResult:
    """
    Convert a payment into the contract currency.

    Raises:
        InvalidExchangeRateError: currencies differ and the rate is missing or not a finite positive number
    """
    if payment_currency == contract_currency:
        return ConversionResult(
            original_amount=amount,
            original_currency=payment_currency,
            converted_amount=amount,
            converted_currency=contract_currency,
            exchange_rate=None,
            requires_conversion=False,
        )

    if exchange_rate is None or not math.isfinite(exchange_rate) or exchange_rate <= 0:
        raise InvalidExchangeRateError(
            f"A finite positive exchange rate is required to convert {payment_currency} to {contract_currency}"
        )

    return ConversionResult(
        original_amount=amount,
        original_currency=payment_currency,
        converted_amount=convert_currency(amount, payment_currency, contract_currency, exchange_rate),
        converted_currency=contract_currency,
        exchange_rate=exchange_rate,
        requires_conversion=True,
    )


def consolidate_flows(
    flows: Dict[str, Dict[str, float]],
    functional_currency: str = REFERENCE_CURRENCY,
    exchange_rate: Optional[float] = None,
) -> dict:
    """
    Consolidate per-currency income/expense flows into one functional currency.

    Args:
        flows: {"ARS": {"income": ..., "expenses": ..., "net": ...}, ...}
        functional_currency: Target currency for totals
        exchange_rate: 1 USD = X ARS, defaults to DEFAULT_EXCHANGE_RATE

    Returns:
        Totals in the functional currency plus the unconverted breakdown
    """
    effective_rate = exchange_rate or DEFAULT_EXCHANGE_RATE
    total_income = 0.0
    total_expenses = 0.0
    breakdown = []

    for currency, data in flows.items():
        total_income += convert_currency(data["income"], currency, functional_currency, effective_rate)
        total_expenses += convert_currency(data["expenses"], currency, functional_currency, effective_rate)
        breakdown.append(
            {
                "currency": currency,
                "income": data["income"],
                "expenses": data["expenses"],
                "net": data.get("net", data["income"] - data["expenses"]),
            }
        )

    return {
        "total_income": total_income,
        "total_expenses": total_expenses,
        "net_result": total_income - total_expenses,
        "functional_currency": functional_currency,
        "exchange_rate": effective_rate,
        "breakdown": breakdown,
    }


def calculate_yield(monthly_net_income: float, property_value: float) -> dict:
    """Annualised gross yield and estimated cap rate for a rented property"""
    annual_income = monthly_net_income * 12
    gross_yield = annual_income / property_value * 100 if property_value > 0 else 0.0

    return {
        "monthly_income": monthly_net_income,
        "annual_income": annual_income,
        "gross_yield": gross_yield,
        "estimated_cap_rate": gross_yield * CAP_RATE_FACTOR,
    }
