"""FastAPI Dependencies

Centralized dependency injection for reuse across all route modules.
Every component is created once in the app lifespan and stored on
app.state; routes receive them through these functions.
"""

import re
from typing import AsyncIterator, Optional

from fastapi import Header, Request

from analysis.llm.insights import InsightRequester
from election.roster import RosterAdmin
from election.session import DEFAULT_SESSION_ID, BallotSession, BallotSessionRegistry
from election.simulation import TrafficSimulator
from election.store import CandidateStore
from exceptions import ValidationError

SESSION_HEADER = "X-Voter-Session"
SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def get_store(request: Request) -> CandidateStore:
    """Dependency to get the shared candidate store from app state

    Usage in routes:
        @router.get("/endpoint")
        async def endpoint(store: CandidateStore = Depends(get_store)):
            return [c.to_dict() for c in store.candidates]
    """
    return request.app.state.store


def get_sessions(request: Request) -> BallotSessionRegistry:
    return request.app.state.sessions


def get_roster(request: Request) -> RosterAdmin:
    return request.app.state.roster


def get_insights(request: Request) -> InsightRequester:
    return request.app.state.insights


def get_simulator(request: Request) -> TrafficSimulator:
    return request.app.state.simulator


async def get_ballot_session(
    request: Request,
    x_voter_session: Optional[str] = Header(None),
) -> AsyncIterator[BallotSession]:
    """Resolve the caller's ballot session from the X-Voter-Session header

    Missing header maps to the default session (single-voter kiosk mode).
    After the handler runs the session is handed back to the registry, so
    sessions that never record anything are not kept.

    Raises:
        ValidationError if the session id is malformed
    """
    session_id = (x_voter_session or DEFAULT_SESSION_ID).strip()
    if not SESSION_ID_PATTERN.match(session_id):
        raise ValidationError(
            f"{SESSION_HEADER} must be 1-64 letters, digits, '-' or '_'",
            field=SESSION_HEADER,
        )

    sessions = get_sessions(request)
    session = sessions.get(session_id)
    try:
        yield session
    finally:
        sessions.release(session)
