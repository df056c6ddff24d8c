"""Investment simulator wizard progress"""

from typing import List
from credit_simulator.domain.models import CreditLine, InvestmentItem, SimulatorProgress

CONFIGURATION_WEIGHT = 33
FINANCING_WEIGHT = 33
RESULTS_WEIGHT = 34


def derive_simulator_progress(
    items: List[InvestmentItem],
    credit_lines: List[CreditLine],
    estimated_monthly_income: float,
) -> SimulatorProgress:
    """
    Derive the configuration → financing → results state of the wizard.

    - Configuration: at least one selected item, every selected amount > 0
    - Financing: at least one credit line, each with rate > 0 and term > 0
    - Results: financing complete and a positive income estimate
    """
    selected = [item for item in items if item.is_selected]
    configuration_complete = bool(selected) and all(item.amount > 0 for item in selected)

    financing_complete = bool(credit_lines) and all(
        line.interest_rate > 0 and line.term_months > 0 for line in credit_lines
    )

    results_ready = financing_complete and estimated_monthly_income > 0

    next_step = None
    if configuration_complete and not financing_complete:
        next_step = "financing"
    elif financing_complete and not results_ready:
        next_step = "results"

    progress = 0
    if configuration_complete:
        progress += CONFIGURATION_WEIGHT
    if financing_complete:
        progress += FINANCING_WEIGHT
    if results_ready:
        progress += RESULTS_WEIGHT

    return SimulatorProgress(
        is_configuration_complete=configuration_complete,
        is_financing_complete=financing_complete,
        is_results_ready=results_ready,
        next_step=next_step,
        progress=progress,
    )
