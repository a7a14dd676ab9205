"""
Admin API routes - roster management, election reset, traffic simulation

Destructive actions (remove, reset) require an explicit confirm flag.
"""

from fastapi import APIRouter, Depends

from config import get_logger
from election.roster import RosterAdmin
from election.simulation import TrafficSimulator
from server.dependencies import get_roster, get_simulator
from server.models.requests import (
    AddCandidateRequest,
    ConfirmRequest,
    RenameCandidateRequest,
    SimulationRequest,
)
from server.utils.responses import success_response

logger = get_logger(__name__)


router = APIRouter(prefix="/api/admin")


@router.post("/candidates", status_code=201)
async def add_candidate(
    request: AddCandidateRequest,
    roster: RosterAdmin = Depends(get_roster),
):
    """Register a new candidate (name and image URL required)"""
    candidate = roster.add_candidate(
        name=request.name,
        office=request.office,
        bio=request.bio,
        image_url=request.image_url,
    )
    return success_response({"candidate": candidate.to_dict()}, roster_size=len(roster.store))


@router.patch("/candidates/{candidate_id}")
async def rename_candidate(
    candidate_id: str,
    request: RenameCandidateRequest,
    roster: RosterAdmin = Depends(get_roster),
):
    candidate = roster.rename_candidate(candidate_id, request.name)
    return success_response({"candidate": candidate.to_dict()})


@router.delete("/candidates/{candidate_id}")
async def remove_candidate(
    candidate_id: str,
    confirm: bool = False,
    roster: RosterAdmin = Depends(get_roster),
):
    """Remove a candidate and all of their votes. Requires ?confirm=true."""
    removed = roster.remove_candidate(candidate_id, confirm=confirm)
    return success_response(
        {"removed": removed.to_dict()},
        roster_size=len(roster.store),
    )


@router.post("/reset")
async def reset_election(
    request: ConfirmRequest,
    roster: RosterAdmin = Depends(get_roster),
):
    """Revert to the default roster and clear every vote. Requires {"confirm": true}."""
    roster.reset_election(confirm=request.confirm)
    return success_response(
        {"candidates": [c.to_dict() for c in roster.store.candidates]},
        message="Election data reset to defaults",
    )


@router.get("/simulation")
async def simulation_status(simulator: TrafficSimulator = Depends(get_simulator)):
    return success_response({"simulation": simulator.status()})


@router.post("/simulation")
async def toggle_simulation(
    request: SimulationRequest,
    simulator: TrafficSimulator = Depends(get_simulator),
):
    """Start or stop the cosmetic vote simulator"""
    if request.enabled:
        changed = simulator.start()
    else:
        changed = await simulator.stop()

    logger.info("simulation toggled", enabled=request.enabled, changed=changed)
    return success_response({"simulation": simulator.status(), "changed": changed})
