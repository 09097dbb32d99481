from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from campushub.models.common import DocumentResponse, ObjectIdStr, utc_now
from campushub.models.school_event_models import SchoolEventResponse


class CalendarSortField(str, Enum):
    CREATED_AT = "created_at"
    DATE_ADDED = "date_added"


class CalendarEntryDocument(BaseModel):
    """A user's bookmark of a school event; unique per (`created_by`, `event_id`)."""

    event_id: str
    created_by: str
    date_added: datetime = Field(default_factory=utc_now)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CreateCalendarEntryRequest(BaseModel):
    event_id: ObjectIdStr
    created_by: Optional[ObjectIdStr] = Field(None, description="Defaults to the caller")


class UpdateCalendarEntryRequest(BaseModel):
    event_id: ObjectIdStr
    created_by: ObjectIdStr


class CalendarEntryResponse(DocumentResponse):
    event_id: str
    created_by: str
    date_added: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CalendarEntryWithEvent(BaseModel):
    calendar_entry: CalendarEntryResponse
    event: SchoolEventResponse
