"""Stateless calculator endpoints: amortization, UVA projection, currency, wizard progress"""

from fastapi import APIRouter, HTTPException

from credit_simulator.api.v1.schemas import (
    AmortizationRequest,
    AmortizationResponse,
    AmortizationRowSchema,
    UVAProjectionRequest,
    UVAProjectionResponse,
    UVAProjectionSchema,
    CurrencyConversionRequest,
    CurrencyConversionResponse,
    ProgressRequest,
    ProgressResponse,
)
from credit_simulator.domain.models import CreditLine, InvestmentItem
from credit_simulator.domain.amortization import generate_amortization_schedule
from credit_simulator.domain.inflation import project_uva_payments
from credit_simulator.domain.currency import convert_payment
from credit_simulator.domain.progress import derive_simulator_progress
from credit_simulator.domain.exceptions import InvalidExchangeRateError

router = APIRouter()


@router.post("/amortization", response_model=AmortizationResponse)
def amortization_table(request_body: AmortizationRequest):
    """French-system schedule; empty while any input is still zero"""
    rows = generate_amortization_schedule(
        request_body.principal, request_body.periodic_rate, request_body.periods
    )

    return AmortizationResponse(
        installment=rows[0].installment if rows else None,
        total_interest=sum(row.interest for row in rows),
        rows=[
            AmortizationRowSchema(
                period=row.period,
                installment=row.installment,
                principal=row.principal,
                interest=row.interest,
                balance=row.balance,
            )
            for row in rows
        ],
    )


@router.post("/uva-projection", response_model=UVAProjectionResponse)
def uva_projection(request_body: UVAProjectionRequest):
    """Payment growth of an inflation-indexed loan"""
    rows = project_uva_payments(
        request_body.initial_payment,
        request_body.annual_inflation,
        request_body.periods,
        request_body.income,
    )
    return UVAProjectionResponse(
        rows=[
            UVAProjectionSchema(period=p.period, payment=p.payment, income_percentage=p.income_percentage)
            for p in rows
        ]
    )


@router.post("/currency/convert", response_model=CurrencyConversionResponse)
def currency_convert(request_body: CurrencyConversionRequest):
    """Convert a payment into the contract currency"""
    try:
        result = convert_payment(
            request_body.amount,
            request_body.payment_currency.upper(),
            request_body.contract_currency.upper(),
            request_body.exchange_rate,
        )
    except InvalidExchangeRateError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return CurrencyConversionResponse(
        original_amount=result.original_amount,
        original_currency=result.original_currency,
        converted_amount=result.converted_amount,
        converted_currency=result.converted_currency,
        exchange_rate=result.exchange_rate,
        requires_conversion=result.requires_conversion,
    )


@router.post("/simulator/progress", response_model=ProgressResponse)
def simulator_progress(request_body: ProgressRequest):
    """Completion state of the investment wizard"""
    progress = derive_simulator_progress(
        [InvestmentItem(**item.model_dump()) for item in request_body.items],
        [CreditLine(**line.model_dump()) for line in request_body.credit_lines],
        request_body.estimated_monthly_income,
    )

    return ProgressResponse(
        is_configuration_complete=progress.is_configuration_complete,
        is_financing_complete=progress.is_financing_complete,
        is_results_ready=progress.is_results_ready,
        next_step=progress.next_step,
        progress=progress.progress,
    )
