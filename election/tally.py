"""Tally engine - pure vote counting and aggregate views over a roster.

Nothing here touches storage. Callers hand in a candidate list and get a
new list (apply_ballot) or a derived view back. The Ballot Session
guarantees apply_ballot runs at most once per confirmed ballot.
"""

from dataclasses import replace
from typing import Dict, List, Mapping, Optional

from election.models import ABSTAIN, Candidate, Office


def apply_ballot(candidates: List[Candidate], selections: Mapping[Office, str]) -> List[Candidate]:
    """Return a new roster with one vote added per office where a real candidate was chosen

    Abstentions, empty entries and ids that are not candidates of that
    office add nothing. The input list and its candidates are not mutated.
    """
    chosen = {
        (office, choice)
        for office, choice in selections.items()
        if choice and choice != ABSTAIN
    }

    updated = []
    for candidate in candidates:
        if (candidate.office, candidate.id) in chosen:
            candidate = replace(candidate, votes=candidate.votes + 1)
            chosen.discard((candidate.office, candidate.id))
        updated.append(candidate)
    return updated


def total_votes(candidates: List[Candidate]) -> int:
    return sum(c.votes for c in candidates)


def ballots_cast_estimate(candidates: List[Candidate]) -> int:
    """Approximate ballots cast: floor(total votes / number of offices)

    Abstentions are not counted anywhere, so this undercounts whenever
    voters abstain. The store keeps an exact counter alongside.
    """
    return total_votes(candidates) // len(Office)


def office_leaderboard(candidates: List[Candidate], office: Office) -> List[Candidate]:
    """Candidates of one office, most votes first; ties keep roster order"""
    return sorted(
        (c for c in candidates if c.office == office),
        key=lambda c: c.votes,
        reverse=True,
    )


def office_breakdown(candidates: List[Candidate]) -> Dict[Office, List[Candidate]]:
    return {office: office_leaderboard(candidates, office) for office in Office}


def global_leader(candidates: List[Candidate]) -> Optional[Candidate]:
    """Highest vote count across every office combined

    Compares counts from different races, so it is a display curiosity
    rather than a result. First in roster order wins ties.
    """
    leader = None
    for candidate in candidates:
        if leader is None or candidate.votes > leader.votes:
            leader = candidate
    return leader


def summarize(candidates: List[Candidate], ballots_submitted: Optional[int] = None) -> dict:
    """Dashboard view: totals, leaders and per-office standings"""
    leader = global_leader(candidates)

    offices = []
    for office, standings in office_breakdown(candidates).items():
        office_total = total_votes(standings)
        offices.append({
            "office": office.value,
            "total_votes": office_total,
            "leader": standings[0].to_dict() if standings and standings[0].votes > 0 else None,
            "standings": [
                {
                    "id": c.id,
                    "name": c.name,
                    "votes": c.votes,
                    "share": round(100.0 * c.votes / office_total, 1) if office_total else 0.0,
                }
                for c in standings
            ],
        })

    summary = {
        "total_votes": total_votes(candidates),
        "ballots_cast_estimate": ballots_cast_estimate(candidates),
        "candidate_count": len(candidates),
        "global_leader": leader.to_dict() if leader else None,
        "offices": offices,
    }
    if ballots_submitted is not None:
        summary["ballots_submitted"] = ballots_submitted
    return summary
