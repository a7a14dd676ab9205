"""
Election Models

Pydantic dataclasses with runtime validation for the ballot domain.
"""

from dataclasses import asdict
from enum import Enum
from typing import Any, Dict

from pydantic.dataclasses import dataclass

from exceptions import ValidationError

# Selection sentinel: counted as a completed choice, never as a vote
ABSTAIN = "abstain"


class Office(str, Enum):
    """The five elected positions, in ballot order"""

    PRESIDENT = "President"
    VICE_PRESIDENT = "Vice President"
    SECRETARY = "Secretary"
    AUDITOR = "Auditor"
    SGT_AT_ARMS = "Sgt at Arms"

    @classmethod
    def parse(cls, value: Any) -> "Office":
        """Resolve an office from its display value or member name

        Accepts "Vice President", "vice president", "VICE_PRESIDENT" or
        "vice_president". Raises ValidationError for anything else.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            needle = value.strip()
            for office in cls:
                if needle.lower() in (office.value.lower(), office.name.lower()):
                    return office
        raise ValidationError(
            f"Unknown office. Must be one of: {[o.value for o in cls]}",
            field="office",
            value=value,
        )


class SessionState(str, Enum):
    """Ballot session lifecycle"""

    EDITING = "editing"
    PENDING_CONFIRMATION = "pending_confirmation"
    SUBMITTED = "submitted"


@dataclass
class Candidate:
    """Candidate entity - a nominee for exactly one office"""

    id: str
    name: str
    office: Office
    bio: str
    image_url: str
    votes: int = 0

    def __post_init__(self):
        if self.votes < 0:
            raise ValidationError(
                "Vote count cannot be negative", field="votes", value=self.votes
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        data = asdict(self)
        data["office"] = self.office.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Candidate":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            office=Office.parse(data["office"]),
            bio=data.get("bio", ""),
            image_url=data.get("image_url", ""),
            votes=int(data.get("votes", 0)),
        )
