"""Dashboard API routes - live tallies recomputed on every request."""

from fastapi import APIRouter, Depends

from election import tally
from election.models import Office
from election.store import CandidateStore
from server.dependencies import get_store
from server.utils.responses import list_response, success_response

router = APIRouter(prefix="/api/dashboard")


@router.get("")
async def get_dashboard(store: CandidateStore = Depends(get_store)):
    """Totals, global leader and per-office standings"""
    summary = tally.summarize(store.candidates, ballots_submitted=store.ballots_submitted)
    return success_response({"dashboard": summary})


@router.get("/offices/{office}")
async def get_office_standings(office: str, store: CandidateStore = Depends(get_store)):
    """Leaderboard for one office, most votes first"""
    resolved = Office.parse(office)
    standings = tally.office_leaderboard(store.candidates, resolved)
    return list_response(
        [c.to_dict() for c in standings],
        key="standings",
        office=resolved.value,
        total_votes=tally.total_votes(standings),
    )
