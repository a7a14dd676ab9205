"""Association election domain: roster, ballot sessions, tallies."""

from election.models import ABSTAIN, Candidate, Office, SessionState

__all__ = ["ABSTAIN", "Candidate", "Office", "SessionState"]
