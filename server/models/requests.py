"""
Pydantic request models for API validation

Field presence and types are checked here; domain rules (required
name/image URL, office membership) stay in the election package so the
CLI and the API enforce the same thing.
"""

from typing import Optional
from pydantic import BaseModel, field_validator

MAX_NAME_LENGTH = 120
MAX_BIO_LENGTH = 2000
MAX_URL_LENGTH = 2000


class SelectionRequest(BaseModel):
    choice: str

    @field_validator("choice")
    @classmethod
    def validate_choice(cls, v: str) -> str:
        return v.strip()


class AddCandidateRequest(BaseModel):
    name: str = ""
    office: str
    bio: Optional[str] = None
    image_url: str = ""

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if len(v) > MAX_NAME_LENGTH:
            raise ValueError(f"Name too long (max {MAX_NAME_LENGTH} characters)")
        return v

    @field_validator("bio")
    @classmethod
    def validate_bio(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > MAX_BIO_LENGTH:
            raise ValueError(f"Bio too long (max {MAX_BIO_LENGTH} characters)")
        return v

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, v: str) -> str:
        if len(v) > MAX_URL_LENGTH:
            raise ValueError("Image URL too long")
        return v


class RenameCandidateRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if len(v) > MAX_NAME_LENGTH:
            raise ValueError(f"Name too long (max {MAX_NAME_LENGTH} characters)")
        return v


class ConfirmRequest(BaseModel):
    confirm: bool = False


class SimulationRequest(BaseModel):
    enabled: bool
