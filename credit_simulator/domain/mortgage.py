"""Property-driven mortgage simulation with best option per bank"""

import math
from typing import Dict, List, Optional
from credit_simulator.domain.models import CreditProduct, MortgageFormData, MortgageSimulationResult
from credit_simulator.domain.amortization import calculate_french_installment, monthly_rate_from_annual

VIABLE = "VIABLE"
EXTENDABLE = "NO_VIABLE_EXTENDER"
NOT_VIABLE = "NO_VIABLE"

STATUS_ORDER = {VIABLE: 0, EXTENDABLE: 1, NOT_VIABLE: 2}

# Catalog free text is in Spanish; keywords match against it lowercased
PROFILE_KEYWORDS: Dict[str, List[str]] = {
    "empleado_dependencia": ["empleado", "relación de dependencia", "dependencia", "clientes que acrediten sueldos"],
    "monotributista": ["monotributista", "autónomo", "independiente"],
    "responsable_inscripto": ["responsable inscripto", "autónomo", "independiente"],
    "empleado_publico": ["empleado público", "público", "empleado", "clientes que acrediten sueldos"],
}

DESTINATION_KEYWORDS: Dict[str, List[str]] = {
    "primera_vivienda": ["primera vivienda", "vivienda propia única", "vivienda única", "vivienda permanente"],
    "segunda_vivienda": ["segunda vivienda", "vivienda"],
    "construccion": ["construcción", "construir"],
    "refaccion": ["refacción", "mejora", "ampliación"],
    "otro": [],
}

REQUIRED_FIELDS = ("max_annual_rate", "max_ltv", "max_payment_to_income", "max_amount", "max_term_months")


def _matches(text: Optional[str], keywords: List[str]) -> bool:
    text = (text or "").lower()
    if not keywords or text == "" or "todos" in text:
        return True
    return any(keyword in text for keyword in keywords)


def filter_products_by_profile(products: List[CreditProduct], profile: str, destination: str) -> List[CreditProduct]:
    """Keep products whose beneficiaries and fund destination fit the applicant"""
    profile_keywords = PROFILE_KEYWORDS.get(profile, [])
    destination_keywords = DESTINATION_KEYWORDS.get(destination, [])

    return [
        p for p in products
        if _matches(p.beneficiaries, profile_keywords) and _matches(p.fund_destination, destination_keywords)
    ]


def calculate_recommended_term(principal: float, monthly_rate: float, max_installment: float) -> Optional[int]:
    """
    Shortest term whose installment fits under `max_installment`.

    Inverts the French formula: n = ln(M / (M - P*r)) / ln(1 + r).
    Returns None when no finite term works.
    """
    if monthly_rate == 0 or max_installment <= 0 or principal <= 0:
        return None

    denominator = max_installment - principal * monthly_rate
    if denominator <= 0:
        # Installment doesn't even cover the interest
        return None

    ratio = max_installment / denominator
    if ratio <= 1:
        return None

    return math.ceil(math.log(ratio) / math.log(1 + monthly_rate))


def simulate_product(form: MortgageFormData, product: CreditProduct) -> Optional[MortgageSimulationResult]:
    """Simulate one product, or None if the catalog row lacks critical data"""
    if any(not getattr(product, name) for name in REQUIRED_FIELDS):
        return None

    amount_to_finance = min(form.property_value * product.max_ltv, product.max_amount)
    down_payment = form.property_value - amount_to_finance

    monthly_rate = monthly_rate_from_annual(product.max_annual_rate)
    max_installment = form.monthly_income * product.max_payment_to_income
    installment = calculate_french_installment(amount_to_finance, monthly_rate, form.desired_term_months)

    recommended_term = None
    if installment <= max_installment:
        status = VIABLE
    else:
        term = calculate_recommended_term(amount_to_finance, monthly_rate, max_installment)
        if term and term <= product.max_term_months:
            status = EXTENDABLE
            recommended_term = term
        else:
            status = NOT_VIABLE
            recommended_term = product.max_term_months

    return MortgageSimulationResult(
        institution=product.institution_name,
        product=product.name,
        amount_to_finance=amount_to_finance,
        down_payment_required=down_payment,
        initial_installment=installment,
        max_allowed_installment=max_installment,
        desired_term_months=form.desired_term_months,
        recommended_term_months=recommended_term,
        max_term_months=product.max_term_months,
        status=status,
        monthly_rate=monthly_rate * 100,
        annual_rate=product.max_annual_rate * 100,
        total_financial_cost=(product.max_total_financial_cost or 0) * 100,
        institution_code=product.institution_code or 0,
        product_data=product,
    )


def best_per_institution(results: List[MortgageSimulationResult]) -> List[MortgageSimulationResult]:
    """
    Keep one result per institution.

    Priority: viable with the lowest installment, then extendable with the
    shortest recommended term, then non-viable with the lowest installment.
    """
    grouped: Dict[int, List[MortgageSimulationResult]] = {}
    for result in results:
        grouped.setdefault(result.institution_code, []).append(result)

    best = []
    for bank_results in grouped.values():
        viable = [r for r in bank_results if r.status == VIABLE]
        extendable = [r for r in bank_results if r.status == EXTENDABLE]

        if viable:
            best.append(min(viable, key=lambda r: r.initial_installment))
        elif extendable:
            best.append(min(extendable, key=lambda r: r.recommended_term_months or 0))
        else:
            best.append(min(bank_results, key=lambda r: r.initial_installment))

    return best


def simulate_mortgage(form: MortgageFormData, products: List[CreditProduct]) -> List[MortgageSimulationResult]:
    """
    Main entry point: best financing plan per bank for a property purchase.

    Sorted viable first, then extendable, then non-viable; cheapest
    installment first within each status.
    """
    candidates = filter_products_by_profile(products, form.user_profile, form.credit_destination)

    results = []
    for product in candidates:
        result = simulate_product(form, product)
        if result is not None:
            results.append(result)

    best = best_per_institution(results)
    best.sort(key=lambda r: (STATUS_ORDER[r.status], r.initial_installment))
    return best
