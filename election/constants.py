"""Default roster and fixed strings for the association election."""

from typing import List

from election.models import Candidate, Office

DEFAULT_BIO = "A dedicated member of our association."

# (id, name, office, bio, seed, votes)
_SEED = [
    ("p1", "Alice Sterling", Office.PRESIDENT,
     "Experienced community leader with a vision for transparency and growth.", "alice", 42),
    ("p2", "Robert Vance", Office.PRESIDENT,
     "Focusing on fiscal responsibility and modernizing our association facilities.", "robert", 38),
    ("vp1", "Catherine Chen", Office.VICE_PRESIDENT,
     "Dedicated to member engagement and social event coordination.", "catherine", 25),
    ("vp2", "David Miller", Office.VICE_PRESIDENT,
     "Bringing 10 years of administrative experience to the executive team.", "david", 29),
    ("sec1", "Elena Rodriguez", Office.SECRETARY,
     "Organized and detail-oriented professional ensuring perfect record keeping.", "elena", 15),
    ("sec2", "Franklin Wu", Office.SECRETARY,
     "Digital native committed to improving our association communication channels.", "franklin", 18),
    ("aud1", "Grace Hopper", Office.AUDITOR,
     "Certified public accountant with a passion for community auditing.", "grace", 55),
    ("aud2", "Henry Thoreau", Office.AUDITOR,
     "Advocating for sustainable spending and clear financial reports.", "henry", 31),
    ("saa1", "Isabella Black", Office.SGT_AT_ARMS,
     "Maintaining order and ensuring safety during all association meetings.", "isabella", 22),
    ("saa2", "James Bond", Office.SGT_AT_ARMS,
     "Professional and courteous enforcement of association bylaws.", "james", 24),
]


def default_roster() -> List[Candidate]:
    """Fresh copy of the seeded candidates (callers may mutate it freely)"""
    return [
        Candidate(
            id=cid,
            name=name,
            office=office,
            bio=bio,
            image_url=f"https://picsum.photos/seed/{seed}/400/400",
            votes=votes,
        )
        for cid, name, office, bio, seed, votes in _SEED
    ]
