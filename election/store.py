"""
Candidate Store - single owner of the roster and its persisted state

Every other component reads candidates through this object and writes
through the Tally Engine / Roster Admin / Ballot Session contracts, which
call the write methods below. Each write is persisted immediately.

Persisted keys:
    voter_candidates        JSON list of candidates (roster order)
    has_voted:<session_id>  true once that voter session confirmed a ballot
    ballots_submitted       exact count of confirmed ballots
"""

from typing import Callable, List, Optional

from config import get_logger
from database.state_storage import SQLiteStateStorage
from election.constants import default_roster
from election.models import Candidate, Office
from exceptions import CandidateNotFoundError, StorageError, ValidationError

logger = get_logger(__name__).bind(component="store")

CANDIDATES_KEY = "voter_candidates"
VOTED_KEY_PREFIX = "has_voted:"
BALLOTS_SUBMITTED_KEY = "ballots_submitted"


def voted_key(session_id: str) -> str:
    return f"{VOTED_KEY_PREFIX}{session_id}"


class CandidateStore:
    """Roster and vote counters, seeded from storage or the default roster"""

    def __init__(
        self,
        storage: SQLiteStateStorage,
        defaults: Callable[[], List[Candidate]] = default_roster,
    ):
        self.storage = storage
        self._defaults = defaults
        self._candidates = self._load()

    def _load(self) -> List[Candidate]:
        raw = self.storage.get(CANDIDATES_KEY)
        if raw is None:
            candidates = self._defaults()
            logger.info("seeded default roster", candidates=len(candidates))
            return candidates

        try:
            candidates = [Candidate.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise StorageError(
                "Persisted roster is malformed", key=CANDIDATES_KEY, original_error=e
            ) from e

        logger.info("loaded persisted roster", candidates=len(candidates))
        return candidates

    def _serialize(self, candidates: List[Candidate]) -> list:
        return [c.to_dict() for c in candidates]

    # ---------- reads ----------

    @property
    def candidates(self) -> List[Candidate]:
        """Copy of the roster in roster order"""
        return list(self._candidates)

    def __len__(self) -> int:
        return len(self._candidates)

    def get(self, candidate_id: str) -> Optional[Candidate]:
        for candidate in self._candidates:
            if candidate.id == candidate_id:
                return candidate
        return None

    def require(self, candidate_id: str) -> Candidate:
        candidate = self.get(candidate_id)
        if candidate is None:
            raise CandidateNotFoundError(candidate_id)
        return candidate

    def for_office(self, office: Office) -> List[Candidate]:
        return [c for c in self._candidates if c.office == office]

    def has_voted(self, session_id: str) -> bool:
        return bool(self.storage.get(voted_key(session_id), False))

    @property
    def ballots_submitted(self) -> int:
        return int(self.storage.get(BALLOTS_SUBMITTED_KEY, 0))

    # ---------- writes ----------

    def replace(self, candidates: List[Candidate]):
        """Swap in a new roster and persist it"""
        candidates = list(candidates)
        self.storage.set(CANDIDATES_KEY, self._serialize(candidates))
        self._candidates = candidates

    def commit_ballot(self, candidates: List[Candidate], session_id: str):
        """Persist a tallied roster together with the voter's marker

        Roster, voted marker and the exact ballot counter are written in one
        storage transaction; in-memory state changes only after it succeeds.
        """
        candidates = list(candidates)
        self.storage.set_many({
            CANDIDATES_KEY: self._serialize(candidates),
            voted_key(session_id): True,
            BALLOTS_SUBMITTED_KEY: self.ballots_submitted + 1,
        })
        self._candidates = candidates

    def reset(self):
        """Restore the default roster and forget every voter marker

        Marker removal, counter removal and the roster write share one
        transaction; a failure leaves both storage and memory untouched.
        """
        candidates = self._defaults()
        cleared = self.storage.write_batch(
            values={CANDIDATES_KEY: self._serialize(candidates)},
            delete_keys=[BALLOTS_SUBMITTED_KEY],
            delete_prefixes=[VOTED_KEY_PREFIX],
        )
        self._candidates = candidates
        logger.warning("election reset", candidates=len(candidates), rows_cleared=cleared)
