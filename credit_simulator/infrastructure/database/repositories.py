"""Data access layer for saved simulations"""

import random
import string
import time
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
from credit_simulator.infrastructure.database.models import InvestmentSimulation
from credit_simulator.domain.exceptions import SimulationNotFoundError

REFERENCE_PREFIX = "SIM"
REFERENCE_SUFFIX_LENGTH = 9
_BASE36 = string.digits + string.ascii_uppercase


def generate_reference_number(now_ms: Optional[int] = None) -> str:
    """SIM-<epoch milliseconds>-<9 uppercase base36 chars>"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(random.choices(_BASE36, k=REFERENCE_SUFFIX_LENGTH))
    return f"{REFERENCE_PREFIX}-{now_ms}-{suffix}"


class SimulationRepository:
    """Repository for saved simulations"""

    def __init__(self, db: Session):
        self.db = db

    def create_simulation(
        self,
        user_email: str,
        simulation_data: Dict[str, Any],
        analysis_results: Optional[Dict[str, Any]] = None,
    ) -> InvestmentSimulation:
        """Persist a simulation under a freshly generated reference number"""
        db_simulation = InvestmentSimulation(
            user_email=user_email,
            reference_number=generate_reference_number(),
            simulation_data=simulation_data,
            analysis_results=analysis_results,
            profile_status="not_started",
            profile_step=0,
        )
        self.db.add(db_simulation)
        self.db.flush()  # Get ID without committing
        return db_simulation

    def get_by_reference(self, reference_number: str) -> InvestmentSimulation:
        """
        Resolve a reference number.

        Raises:
            SimulationNotFoundError: no simulation carries that reference
        """
        simulation = (
            self.db.query(InvestmentSimulation)
            .filter(InvestmentSimulation.reference_number == reference_number)
            .first()
        )
        if simulation is None:
            raise SimulationNotFoundError(f"Simulation {reference_number} not found")
        return simulation
