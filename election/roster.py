"""Roster administration - create, rename and remove candidates, reset the election."""

import uuid
from dataclasses import replace
from typing import Optional

from config import get_logger
from election.constants import DEFAULT_BIO
from election.models import Candidate, Office
from election.session import BallotSessionRegistry
from election.store import CandidateStore
from exceptions import ConfirmationRequiredError, ValidationError
from server.metrics import metrics

logger = get_logger(__name__).bind(component="roster")


class RosterAdmin:
    """Admin-side mutations of the Candidate Store"""

    def __init__(self, store: CandidateStore, sessions: Optional[BallotSessionRegistry] = None):
        self.store = store
        self.sessions = sessions

    def add_candidate(
        self,
        name: str,
        office,
        bio: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> Candidate:
        """Register a new candidate with zero votes

        Raises:
            ValidationError: name or image_url missing, or unknown office
        """
        name = (name or "").strip()
        image_url = (image_url or "").strip()
        if not name:
            raise ValidationError("Please provide a name and image URL.", field="name")
        if not image_url:
            raise ValidationError("Please provide a name and image URL.", field="image_url")

        candidate = Candidate(
            id=uuid.uuid4().hex,
            name=name,
            office=Office.parse(office),
            bio=(bio or "").strip() or DEFAULT_BIO,
            image_url=image_url,
            votes=0,
        )
        self.store.replace(self.store.candidates + [candidate])

        metrics.roster_changes.labels(action="add").inc()
        logger.info(
            "candidate added",
            candidate_id=candidate.id,
            office=candidate.office.value,
            roster_size=len(self.store),
        )
        return candidate

    def rename_candidate(self, candidate_id: str, new_name: str) -> Candidate:
        """Replace a candidate's name in place; votes and office are untouched"""
        new_name = (new_name or "").strip()
        if not new_name:
            raise ValidationError("Name cannot be empty.", field="name")

        current = self.store.require(candidate_id)
        renamed = replace(current, name=new_name)
        self.store.replace([
            renamed if c.id == candidate_id else c for c in self.store.candidates
        ])

        metrics.roster_changes.labels(action="rename").inc()
        logger.info("candidate renamed", candidate_id=candidate_id)
        return renamed

    def remove_candidate(self, candidate_id: str, confirm: bool = False) -> Candidate:
        """Delete a candidate and their accumulated votes permanently"""
        candidate = self.store.require(candidate_id)
        if not confirm:
            raise ConfirmationRequiredError(
                "remove_candidate",
                "Removing a candidate deletes all of their current votes; confirm to proceed",
            )

        self.store.replace([c for c in self.store.candidates if c.id != candidate_id])

        metrics.roster_changes.labels(action="remove").inc()
        logger.warning(
            "candidate removed",
            candidate_id=candidate_id,
            office=candidate.office.value,
            votes_discarded=candidate.votes,
        )
        return candidate

    def reset_election(self, confirm: bool = False):
        """Revert to the default roster, clear every vote marker and live session"""
        if not confirm:
            raise ConfirmationRequiredError(
                "reset_election",
                "Resetting discards all votes and reverts the candidate list to defaults; "
                "confirm to proceed",
            )

        self.store.reset()
        if self.sessions is not None:
            self.sessions.reset_all()

        metrics.election_resets.inc()
