"""
Ballot Session - one voter's selections and submission lifecycle

State machine:

    EDITING --request_submit--> PENDING_CONFIRMATION --confirm_submit--> SUBMITTED
       ^                               |
       +---------cancel_confirm--------+

SUBMITTED is terminal for the session; only an administrative reset()
returns it to EDITING. The store write in confirm_submit() happens before
any in-memory state flips, so a failed write leaves the session pending
and the roster untouched.
"""

from typing import Dict, List, Optional

from config import get_logger
from election import tally
from election.models import ABSTAIN, Office, SessionState
from election.store import CandidateStore
from exceptions import (
    BallotLockedError,
    IncompleteBallotError,
    InvalidTransitionError,
    ValidationError,
)
from server.metrics import metrics

logger = get_logger(__name__).bind(component="session")

DEFAULT_SESSION_ID = "default"


class BallotSession:
    """In-progress ballot for a single voter session"""

    def __init__(self, store: CandidateStore, session_id: str = DEFAULT_SESSION_ID):
        self.store = store
        self.session_id = session_id
        self._selections: Dict[Office, str] = {}
        self._state = (
            SessionState.SUBMITTED if store.has_voted(session_id) else SessionState.EDITING
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def has_submitted(self) -> bool:
        return self._state == SessionState.SUBMITTED

    @property
    def is_idle(self) -> bool:
        """Editing with nothing selected; indistinguishable from a fresh session"""
        return self._state == SessionState.EDITING and not self._selections

    @property
    def selections(self) -> Dict[Office, str]:
        return dict(self._selections)

    def _require_editing(self, operation: str):
        if self._state == SessionState.SUBMITTED:
            raise BallotLockedError(
                "Your vote has already been submitted",
                state=self._state.value,
                operation=operation,
            )
        if self._state != SessionState.EDITING:
            raise InvalidTransitionError(
                "Ballot is awaiting confirmation; cancel to make changes",
                state=self._state.value,
                operation=operation,
            )

    def select(self, office, choice: str):
        """Record a candidate id or ABSTAIN for an office, replacing any prior entry"""
        self._require_editing("select")
        office = Office.parse(office)

        choice = (choice or "").strip()
        if not choice:
            raise ValidationError("Selection cannot be empty", field="choice")

        if choice != ABSTAIN:
            candidate = self.store.get(choice)
            if candidate is None or candidate.office != office:
                raise ValidationError(
                    f"Not a candidate for {office.value}", field="choice", value=choice
                )

        self._selections[office] = choice
        metrics.selections_recorded.labels(
            kind="abstain" if choice == ABSTAIN else "candidate"
        ).inc()

    def clear_selections(self):
        self._require_editing("clear_selections")
        self._selections.clear()

    def missing_offices(self) -> List[Office]:
        return [office for office in Office if not self._selections.get(office)]

    def can_submit(self) -> bool:
        return not self.missing_offices()

    def request_submit(self):
        """Move to pending confirmation; the roster is not touched yet"""
        self._require_editing("request_submit")
        missing = self.missing_offices()
        if missing:
            raise IncompleteBallotError([office.value for office in missing])

        self._state = SessionState.PENDING_CONFIRMATION
        logger.info("ballot awaiting confirmation", session_id=self.session_id)

    def cancel_confirm(self):
        if self._state != SessionState.PENDING_CONFIRMATION:
            raise InvalidTransitionError(
                "No ballot is awaiting confirmation",
                state=self._state.value,
                operation="cancel_confirm",
            )
        self._state = SessionState.EDITING

    def confirm_submit(self):
        """Tally the ballot, mark this voter as done and clear selections

        One-shot: a second call (or a call from any state other than
        PENDING_CONFIRMATION) raises without mutating anything.
        """
        if self._state == SessionState.SUBMITTED:
            raise BallotLockedError(
                "Your vote has already been submitted",
                state=self._state.value,
                operation="confirm_submit",
            )
        if self._state != SessionState.PENDING_CONFIRMATION:
            raise InvalidTransitionError(
                "Submit the ballot before confirming it",
                state=self._state.value,
                operation="confirm_submit",
            )

        updated = tally.apply_ballot(self.store.candidates, self._selections)
        self.store.commit_ballot(updated, self.session_id)

        abstained = sum(1 for choice in self._selections.values() if choice == ABSTAIN)
        self._state = SessionState.SUBMITTED
        self._selections.clear()

        metrics.ballots_submitted.inc()
        logger.info(
            "ballot confirmed",
            session_id=self.session_id,
            votes_cast=len(Office) - abstained,
            abstained=abstained,
        )

    def reset(self):
        """Administrative reset back to an empty, editable ballot"""
        self._state = SessionState.EDITING
        self._selections.clear()

    def snapshot(self) -> dict:
        return {
            "session_id": self.session_id,
            "state": self._state.value,
            "has_submitted": self.has_submitted,
            "selections": {office.value: choice for office, choice in self._selections.items()},
            "selected_count": len(self._selections),
            "office_count": len(Office),
            "can_submit": self.can_submit(),
            "missing": [office.value for office in self.missing_offices()],
        }


class BallotSessionRegistry:
    """Voter sessions keyed by session id, created on first use

    Only sessions holding state stay registered: callers hand sessions back
    through release() once they are done with them, and idle ones are
    dropped.
    """

    def __init__(self, store: CandidateStore):
        self.store = store
        self._sessions: Dict[str, BallotSession] = {}

    def get(self, session_id: Optional[str] = None) -> BallotSession:
        session_id = session_id or DEFAULT_SESSION_ID
        session = self._sessions.get(session_id)
        if session is None:
            session = BallotSession(self.store, session_id)
            self._sessions[session_id] = session
        return session

    def release(self, session: BallotSession):
        """Forget the session if it holds no selections and is still editing"""
        if session.is_idle and self._sessions.get(session.session_id) is session:
            del self._sessions[session.session_id]

    def __len__(self) -> int:
        return len(self._sessions)

    def reset_all(self):
        for session in self._sessions.values():
            session.reset()
        self._sessions.clear()
