"""/v1/comparison/{session_id} - per-session comparison basket"""

from fastapi import APIRouter, Depends

from credit_simulator.api.v1.schemas import ComparisonResponse, ComparisonItemSchema, CreditResultSchema
from credit_simulator.api.v1.simulation import to_result_schema
from credit_simulator.api.dependencies import get_comparison_store
from credit_simulator.domain.comparison import ComparisonBasket, ComparisonStore
from credit_simulator.domain.models import CreditResult

router = APIRouter()


def _basket_response(session_id: str, basket: ComparisonBasket) -> ComparisonResponse:
    return ComparisonResponse(
        session_id=session_id,
        items=[
            ComparisonItemSchema(**to_result_schema(item.result).model_dump(), added_at=item.added_at)
            for item in basket.items
        ],
    )


@router.get("/comparison/{session_id}", response_model=ComparisonResponse)
def get_comparison(session_id: str, store: ComparisonStore = Depends(get_comparison_store)):
    return _basket_response(session_id, store.peek(session_id))


@router.post("/comparison/{session_id}", response_model=ComparisonResponse)
def add_to_comparison(
    session_id: str,
    result: CreditResultSchema,
    store: ComparisonStore = Depends(get_comparison_store),
):
    """Add a result to the basket; re-adding the same id changes nothing"""
    basket = store.get(session_id)
    basket.add(
        CreditResult(
            id=result.id,
            institution=result.institution,
            product=result.product,
            monthly_payment=result.monthly_payment,
            income_percentage=result.income_percentage,
            rate=result.rate,
            total_financial_cost=result.total_financial_cost,
            max_term_months=result.max_term_months,
            ltv=result.ltv,
            observations=tuple(result.observations),
            is_uva=result.is_uva,
            exceeds_payment_ratio=result.exceeds_payment_ratio,
        )
    )
    return _basket_response(session_id, basket)


@router.delete("/comparison/{session_id}/{result_id}", response_model=ComparisonResponse)
def remove_from_comparison(
    session_id: str,
    result_id: str,
    store: ComparisonStore = Depends(get_comparison_store),
):
    basket = store.peek(session_id)
    basket.remove(result_id)
    return _basket_response(session_id, basket)


@router.delete("/comparison/{session_id}", response_model=ComparisonResponse)
def clear_comparison(session_id: str, store: ComparisonStore = Depends(get_comparison_store)):
    """Empty the basket and forget the session"""
    store.discard(session_id)
    return _basket_response(session_id, ComparisonBasket())
