"""Credit product evaluator - matches an applicant profile against the catalog"""

from typing import Any, List, Optional, Tuple
from credit_simulator.domain.models import (
    CreditFormData,
    CreditProduct,
    CreditResult,
    CreditType,
    EvaluationOutcome,
    SkippedProduct,
)
from credit_simulator.domain.amortization import calculate_french_installment
from credit_simulator.domain.exceptions import CatalogFieldMissingError

UVA_MARKER = "UVA"

REFERENCE_PAYMENT_NOTE = "Approximate payment based on reference values"
UVA_NOTE = "UVA product - payment subject to inflation adjustment"

LTV_FAMILIES = (CreditType.MORTGAGE, CreditType.COLLATERALIZED)


def _require(product: CreditProduct, field_name: str) -> Any:
    value = getattr(product, field_name)
    if value is None:
        raise CatalogFieldMissingError(product.id, field_name)
    return value


def is_uva_product(product: CreditProduct) -> bool:
    """Inflation-indexed products carry "UVA" somewhere in their denomination"""
    return UVA_MARKER in (product.denomination or "").upper()


def result_id(product: CreditProduct) -> str:
    """Stable key so repeated evaluations de-duplicate downstream"""
    return f"{_require(product, 'institution_code')}-{product.id}"


def check_eligibility(form: CreditFormData, product: CreditProduct) -> Optional[str]:
    """
    Apply the hard qualification rules.

    Returns the rejection reason, or None when the applicant qualifies.

    Raises:
        CatalogFieldMissingError: product lacks a field a rule depends on
    """
    if form.monthly_income <= 0:
        return "Monthly income must be positive"

    if form.monthly_income < _require(product, "min_income"):
        return "Income below the required minimum"

    if form.tenure_months < _require(product, "min_tenure_months"):
        return "Insufficient employment tenure"

    if form.term_months > _require(product, "max_term_months"):
        return "Term exceeds the maximum allowed"

    min_amount = product.min_amount or 0
    if not min_amount <= form.amount <= _require(product, "max_amount"):
        return "Amount outside the allowed range"

    max_age = _require(product, "max_age")
    if form.product_type == CreditType.MORTGAGE:
        # Mortgages must be repaid before the age limit
        if form.age + form.term_months / 12 > max_age:
            return "Age at end of term exceeds the maximum allowed"
    elif form.age > max_age:
        return "Age exceeds the maximum allowed"

    if form.product_type in LTV_FAMILIES and form.appraisal_value:
        if form.amount / form.appraisal_value > _require(product, "max_ltv"):
            return "Loan-to-value ratio exceeds the maximum"

    return None


def calculate_monthly_payment(form: CreditFormData, product: CreditProduct) -> Tuple[float, List[str]]:
    """
    Estimate the first monthly payment.

    Priority:
    - Effective annual rate: French installment at TEA / 12
    - Reference payment per reference amount: proportional estimate
    - Neither: 0.0 (caller skips the product)
    """
    rate = product.max_annual_rate
    if rate and rate > 0:
        return calculate_french_installment(form.amount, rate / 12, form.term_months), []

    reference = product.reference_payment
    if reference and reference > 0:
        return form.amount / product.reference_amount * reference, [REFERENCE_PAYMENT_NOTE]

    return 0.0, []


def evaluate_product(form: CreditFormData, product: CreditProduct) -> Tuple[Optional[CreditResult], Optional[str]]:
    """Evaluate a single product. Returns (result, None) or (None, skip reason)."""
    reason = check_eligibility(form, product)
    if reason:
        return None, reason

    payment, observations = calculate_monthly_payment(form, product)
    if payment <= 0:
        return None, "Not enough information to compute the payment"

    income_percentage = payment / form.monthly_income * 100
    max_ratio_percentage = _require(product, "max_payment_to_income") * 100

    # Advisory only: the applicant sees the warning but keeps the offer
    exceeds_ratio = income_percentage > max_ratio_percentage
    if exceeds_ratio:
        observations.append(
            f"Payment is {income_percentage:.1f}% of income, above the "
            f"{max_ratio_percentage:.1f}% allowed by the lender"
        )

    uva = is_uva_product(product)
    if uva:
        observations.append(UVA_NOTE)

    ltv = None
    if form.product_type in LTV_FAMILIES and form.appraisal_value:
        ltv = form.amount / form.appraisal_value * 100

    result = CreditResult(
        id=result_id(product),
        institution=product.institution_name,
        product=product.name,
        monthly_payment=payment,
        income_percentage=income_percentage,
        rate=product.max_annual_rate or 0.0,
        total_financial_cost=product.max_total_financial_cost or 0.0,
        max_term_months=product.max_term_months,
        ltv=ltv,
        observations=tuple(observations),
        is_uva=uva,
        exceeds_payment_ratio=exceeds_ratio,
        product_data=product,
    )
    return result, None


def evaluate_products(form: CreditFormData, products: List[CreditProduct]) -> EvaluationOutcome:
    """
    Main entry point: filter the catalog down to qualifying products.

    Never raises for bad catalog data. Products with missing or malformed
    fields land in `skipped` with the reason, next to the rule rejections.
    Results are ordered by monthly payment, cheapest first.
    """
    results: List[CreditResult] = []
    skipped: List[SkippedProduct] = []

    for product in products:
        try:
            result, reason = evaluate_product(form, product)
        except CatalogFieldMissingError as e:
            result, reason = None, str(e)
        except (TypeError, ValueError, ZeroDivisionError) as e:
            result, reason = None, f"Malformed catalog data: {e}"

        if result is None:
            skipped.append(SkippedProduct(product_id=product.id, reason=reason))
        else:
            results.append(result)

    results.sort(key=lambda r: r.monthly_payment)
    return EvaluationOutcome(results=results, skipped=skipped)
