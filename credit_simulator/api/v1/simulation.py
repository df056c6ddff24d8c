"""POST /v1/credit/simulate and /v1/mortgage/simulate - catalog-backed simulations"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from credit_simulator.api.v1.schemas import (
    CreditSimulationRequest,
    CreditSimulationResponse,
    CreditResultSchema,
    SkippedProductSchema,
    UVAProjectionSchema,
    MortgageSimulationRequest,
    MortgageSimulationResponse,
    MortgageResultSchema,
)
from credit_simulator.api.dependencies import get_catalog_client, get_request_id
from credit_simulator.infrastructure.clients.catalog import CatalogClient
from credit_simulator.domain.models import CreditFormData, CreditResult, CreditType, MortgageFormData
from credit_simulator.domain.evaluator import evaluate_products
from credit_simulator.domain.inflation import project_uva_payments
from credit_simulator.domain.mortgage import simulate_mortgage
from credit_simulator.domain.exceptions import CatalogAPIError
from credit_simulator.infrastructure.observability.metrics import record_simulation, catalog_fetch_failures_counter
from credit_simulator.infrastructure.observability.logging import log_simulation

router = APIRouter()


def to_result_schema(result: CreditResult, form: CreditFormData | None = None) -> CreditResultSchema:
    """Serialise a result, attaching the inflation projection for UVA products"""
    projection = None
    if form is not None and result.is_uva and form.expected_inflation is not None:
        projection = [
            UVAProjectionSchema(period=p.period, payment=p.payment, income_percentage=p.income_percentage)
            for p in project_uva_payments(
                result.monthly_payment, form.expected_inflation, form.term_months, form.monthly_income
            )
        ]

    return CreditResultSchema(
        id=result.id,
        institution=result.institution,
        product=result.product,
        monthly_payment=result.monthly_payment,
        income_percentage=result.income_percentage,
        rate=result.rate,
        total_financial_cost=result.total_financial_cost,
        max_term_months=result.max_term_months,
        ltv=result.ltv,
        observations=list(result.observations),
        is_uva=result.is_uva,
        exceeds_payment_ratio=result.exceeds_payment_ratio,
        uva_projection=projection,
    )


@router.post("/credit/simulate", response_model=CreditSimulationResponse)
async def simulate_credit(
    request_body: CreditSimulationRequest,
    request: Request,
    catalog_client: CatalogClient = Depends(get_catalog_client),
):
    """
    Compare every catalog product of the requested family against the applicant.

    Flow:
    1. Fetch the family's products from the catalog
    2. Filter and price them for the applicant
    3. Attach UVA projections when an inflation estimate was supplied
    """
    start_time = time.time()
    request_id = get_request_id(request)
    form = CreditFormData(**request_body.model_dump())

    try:
        products = await catalog_client.get_products(form.product_type)
    except CatalogAPIError as e:
        catalog_fetch_failures_counter.inc()
        logging.error(f"Catalog error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Product catalog unavailable")

    outcome = evaluate_products(form, products)

    duration_ms = (time.time() - start_time) * 1000
    record_simulation(form.product_type.value, len(outcome.results))
    log_simulation(request_id, form.product_type.value, len(outcome.results), len(outcome.skipped), duration_ms)

    return CreditSimulationResponse(
        product_type=form.product_type,
        results=[to_result_schema(r, form) for r in outcome.results],
        skipped=[SkippedProductSchema(product_id=s.product_id, reason=s.reason) for s in outcome.skipped],
    )


@router.post("/mortgage/simulate", response_model=MortgageSimulationResponse)
async def simulate_mortgage_endpoint(
    request_body: MortgageSimulationRequest,
    request: Request,
    catalog_client: CatalogClient = Depends(get_catalog_client),
):
    """Best financing plan per bank for buying a property of the given value"""
    request_id = get_request_id(request)

    try:
        products = await catalog_client.get_products(CreditType.MORTGAGE)
    except CatalogAPIError as e:
        catalog_fetch_failures_counter.inc()
        logging.error(f"Catalog error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Product catalog unavailable")

    if not products:
        return MortgageSimulationResponse(results=[], message="No mortgage products available")

    results = simulate_mortgage(MortgageFormData(**request_body.model_dump()), products)
    record_simulation(CreditType.MORTGAGE.value, len(results))

    return MortgageSimulationResponse(
        results=[
            MortgageResultSchema(
                institution=r.institution,
                product=r.product,
                amount_to_finance=r.amount_to_finance,
                down_payment_required=r.down_payment_required,
                initial_installment=r.initial_installment,
                max_allowed_installment=r.max_allowed_installment,
                desired_term_months=r.desired_term_months,
                recommended_term_months=r.recommended_term_months,
                max_term_months=r.max_term_months,
                status=r.status,
                monthly_rate=r.monthly_rate,
                annual_rate=r.annual_rate,
                total_financial_cost=r.total_financial_cost,
                institution_code=r.institution_code,
            )
            for r in results
        ],
        message=None if results else "No products match your profile and credit destination",
    )
