"""
# School Event Models

School events are organized either by the administration or by a department. Event dates may
not be set in the past, neither on creation nor on update. Only the descriptive fields
(`title`, `description`, `date`, `venue`) are editable after creation.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from campushub.models.common import DocumentResponse, as_utc, utc_now

UPDATABLE_EVENT_FIELDS = ("title", "description", "date", "venue")


class EventOrganizer(str, Enum):
    ADMIN = "admin"
    DEPARTMENT = "department"


class EventListType(str, Enum):
    ALL = "all"
    UPCOMING = "upcoming"
    PAST = "past"


class EventSortField(str, Enum):
    DATE = "date"
    CREATED_AT = "created_at"
    TITLE = "title"


class SchoolEventDocument(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    date: datetime
    venue: str = Field(..., min_length=1, max_length=150)
    organized_by: EventOrganizer
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CreateSchoolEventRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    date: datetime
    venue: str = Field(..., min_length=1, max_length=150)
    organized_by: EventOrganizer

    @field_validator("date")
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        return as_utc(v)


class UpdateSchoolEventRequest(BaseModel):
    """
    Partial event update.

    Unknown keys are kept (`extra="allow"`) so the service can list every field that may not
    be changed in one error message.
    """

    model_config = ConfigDict(extra="allow")

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    date: Optional[datetime] = None
    venue: Optional[str] = Field(None, min_length=1, max_length=150)

    @field_validator("date")
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else v

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_dump(exclude_none=True):
            raise ValueError("At least one field must be provided for update")
        return self

    def disallowed_fields(self) -> List[str]:
        return sorted((self.model_extra or {}).keys())


class DateRangeRequest(BaseModel):
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        return as_utc(v)

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.end_date < self.start_date:
            raise ValueError("End date cannot be earlier than start date")
        return self


class SchoolEventResponse(DocumentResponse):
    title: str
    description: str
    date: datetime
    venue: str
    organized_by: EventOrganizer
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SchoolEventListResponse(BaseModel):
    events: List[SchoolEventResponse]
    total: int
    page: int
    limit: int
    total_pages: int
