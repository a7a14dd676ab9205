"""Ballot API routes - roster browsing and the voter's submission flow.

All handlers are async and run on the event loop, so a confirmation's
tally, voter marker and selection reset land before any other request
is served.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from election.models import ABSTAIN, Office
from election.session import BallotSession
from election.store import CandidateStore
from server.dependencies import get_ballot_session, get_store
from server.models.requests import SelectionRequest
from server.utils.responses import list_response, success_response

router = APIRouter(prefix="/api")


@router.get("/offices")
async def list_offices():
    """The fixed positions, in ballot order"""
    return list_response(
        [{"key": o.name.lower(), "name": o.value} for o in Office],
        key="offices",
        abstain=ABSTAIN,
    )


@router.get("/candidates")
async def list_candidates(
    office: Optional[str] = None,
    store: CandidateStore = Depends(get_store),
):
    """Candidate roster, optionally limited to one office"""
    if office:
        candidates = store.for_office(Office.parse(office))
    else:
        candidates = store.candidates
    return list_response([c.to_dict() for c in candidates], key="candidates")


@router.get("/ballot")
async def get_ballot(session: BallotSession = Depends(get_ballot_session)):
    return success_response({"ballot": session.snapshot()})


@router.put("/ballot/selections/{office}")
async def select(
    office: str,
    request: SelectionRequest,
    session: BallotSession = Depends(get_ballot_session),
):
    """Choose a candidate id (or 'abstain') for one office"""
    session.select(office, request.choice)
    return success_response({"ballot": session.snapshot()})


@router.delete("/ballot/selections")
async def clear_selections(session: BallotSession = Depends(get_ballot_session)):
    session.clear_selections()
    return success_response({"ballot": session.snapshot()})


@router.post("/ballot/submit")
async def request_submit(session: BallotSession = Depends(get_ballot_session)):
    """First step: every office must be filled. Nothing is counted yet."""
    session.request_submit()
    return success_response(
        {"ballot": session.snapshot()},
        message="Once you submit your ballot, your vote cannot be changed or retracted.",
    )


@router.post("/ballot/confirm")
async def confirm_submit(session: BallotSession = Depends(get_ballot_session)):
    """Second step: cast the ballot. Irreversible."""
    session.confirm_submit()
    return success_response(
        {"ballot": session.snapshot()},
        message="Thank you! Your vote has been submitted.",
    )


@router.post("/ballot/cancel")
async def cancel_confirm(session: BallotSession = Depends(get_ballot_session)):
    """Go back and review"""
    session.cancel_confirm()
    return success_response({"ballot": session.snapshot()})
