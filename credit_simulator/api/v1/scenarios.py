"""/v1/simulations - save a simulation and look it up by reference number"""

import logging
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from credit_simulator.api.v1.schemas import SaveSimulationRequest, SaveSimulationResponse, SimulationRecordResponse
from credit_simulator.api.dependencies import get_notification_client, get_request_id
from credit_simulator.infrastructure.database.session import get_db
from credit_simulator.infrastructure.database.repositories import SimulationRepository
from credit_simulator.infrastructure.clients.notifications import NotificationClient
from credit_simulator.infrastructure.observability.metrics import saved_simulation_counter
from credit_simulator.domain.exceptions import SimulationNotFoundError

router = APIRouter()


@router.post("/simulations", response_model=SaveSimulationResponse)
def save_simulation(
    request_body: SaveSimulationRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    notification_client: NotificationClient = Depends(get_notification_client),
):
    """
    Persist a simulation and mail the applicant its reference number.

    The email goes out as a background task; the response never waits on it.
    """
    request_id = get_request_id(request)

    try:
        repo = SimulationRepository(db)
        simulation = repo.create_simulation(
            user_email=request_body.email,
            simulation_data=request_body.simulation_data,
            analysis_results=request_body.analysis_results,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to save simulation: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    saved_simulation_counter.inc()
    logging.info(
        "Simulation saved",
        extra={"request_id": request_id, "reference_number": simulation.reference_number},
    )

    background_tasks.add_task(
        notification_client.send_simulation_saved,
        request_body.email,
        simulation.reference_number,
    )

    return SaveSimulationResponse(
        reference_number=simulation.reference_number,
        simulation_id=str(simulation.id),
    )


@router.get("/simulations/{reference_number}", response_model=SimulationRecordResponse)
def get_simulation(reference_number: str, db: Session = Depends(get_db)):
    """Resolve a reference number to the stored simulation"""
    try:
        simulation = SimulationRepository(db).get_by_reference(reference_number)
    except SimulationNotFoundError:
        raise HTTPException(status_code=404, detail="Simulation code not found")

    return SimulationRecordResponse(
        simulation_id=str(simulation.id),
        reference_number=simulation.reference_number,
        user_email=simulation.user_email,
        simulation_data=simulation.simulation_data,
        analysis_results=simulation.analysis_results,
        profile_status=simulation.profile_status,
        profile_step=simulation.profile_step,
        created_at=simulation.created_at.isoformat(),
    )
