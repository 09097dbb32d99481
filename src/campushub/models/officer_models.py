"""
# Officer Models

An officer is a user holding a named position in an organization for a bounded term
(`start_term` < `end_term`). A user may hold at most one officer record per organization.

## Officer Positions

`OFFICER_POSITIONS` is the list of recognised positions: the executive board, a VP and a
member seat for each standing committee, and the year-level representatives.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from campushub.models.common import DocumentResponse, ObjectIdStr, as_utc, utc_now

COMMITTEES = [
    "Academics",
    "Finance",
    "Audit",
    "Membership",
    "Communication",
    "Logistics",
    "Graphics And Publications",
    "Non-Academics (Sociocultural Committee)",
    "Non-Academics (Sports Committee)",
]

OFFICER_POSITIONS: List[str] = [
    "President",
    "Executive Vice President",
    "General Secretary",
    "Secretary Board",
    *[title for committee in COMMITTEES for title in (f"Vp For {committee}", f"Member Of Vp For {committee}")],
    "Representative 1st year FM-A",
    "Representative 1st year FM-B",
    "Representative 1st year MM-A",
    "Representative 1st year MM-B",
    "Representative 1st year HRDM",
    "Representative 2nd year FM-A",
    "Representative 2nd year FM-B",
    "Representative 2nd year MM",
    "Representative 3rd year FM",
    "Representative 3rd year MM",
    "Representative 3rd year HRDM",
    "Representative 4th year FM",
    "Representative 4th year MM",
    "Representative 4th year HRDM",
]

END_TERM_ORDER_MESSAGE = "End term must be after start term"


def _validate_position(value: str) -> str:
    if value not in OFFICER_POSITIONS:
        raise ValueError(f"Position must be one of: {', '.join(OFFICER_POSITIONS)}")
    return value


class OfficerSortField(str, Enum):
    CREATED_AT = "created_at"
    START_TERM = "start_term"
    END_TERM = "end_term"
    POSITION = "position"


class OfficerDocument(BaseModel):
    user_id: str = Field(..., description="Officer user id")
    org_id: str = Field(..., description="Organization id")
    position: str = Field(..., max_length=60)
    start_term: datetime
    end_term: datetime
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CreateOfficerRequest(BaseModel):
    user_id: ObjectIdStr
    org_id: ObjectIdStr
    position: str = Field(..., max_length=60)
    start_term: datetime
    end_term: datetime

    @field_validator("position")
    @classmethod
    def known_position(cls, v: str) -> str:
        return _validate_position(v)

    @field_validator("start_term", "end_term")
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        return as_utc(v)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_term <= self.start_term:
            raise ValueError(END_TERM_ORDER_MESSAGE)
        return self


class UpdateOfficerRequest(BaseModel):
    """
    Partial officer update.

    `user_id` and `org_id` are accepted only so the service can reject them with a precise
    message; an officer record never moves between users or organizations.
    """

    model_config = ConfigDict(extra="forbid")

    user_id: Optional[str] = None
    org_id: Optional[str] = None
    position: Optional[str] = Field(None, max_length=60)
    start_term: Optional[datetime] = None
    end_term: Optional[datetime] = None

    @field_validator("position")
    @classmethod
    def known_position(cls, v: Optional[str]) -> Optional[str]:
        return _validate_position(v) if v is not None else v

    @field_validator("start_term", "end_term")
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else v

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_dump(exclude_none=True):
            raise ValueError("At least one field must be provided for update")
        return self


class OfficerResponse(DocumentResponse):
    user_id: str
    org_id: str
    position: str
    start_term: datetime
    end_term: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

