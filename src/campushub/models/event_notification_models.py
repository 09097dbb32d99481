"""
# Event Notification Models

A notification records a message delivered to a user about a school event. Delivery happens
over SMS after the record is inserted; its `status` reflects whether the gateway accepted it.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from campushub.models.common import DocumentResponse, ObjectIdStr, utc_now

NOTIFICATION_FIELDS = [
    "_id",
    "event_id",
    "recipient_id",
    "message",
    "sent_at",
    "status",
    "created_at",
    "updated_at",
]


class NotificationStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"


class NotificationSortField(str, Enum):
    SENT_AT = "sent_at"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    STATUS = "status"


class EventNotificationDocument(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    event_id: str
    recipient_id: str
    message: str = Field(..., min_length=1, max_length=2000)
    sent_at: datetime = Field(default_factory=utc_now)
    status: NotificationStatus = NotificationStatus.SENT
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CreateNotificationRequest(BaseModel):
    event_id: ObjectIdStr
    recipient_id: ObjectIdStr
    message: str = Field(..., min_length=1, max_length=2000)


class BulkNotificationRequest(BaseModel):
    event_id: ObjectIdStr
    recipient_ids: List[ObjectIdStr] = Field(..., min_length=1)
    message: str = Field(..., min_length=1, max_length=2000)


class UpdateNotificationRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    message: Optional[str] = Field(None, min_length=1, max_length=2000)
    status: Optional[NotificationStatus] = None

    @model_validator(mode="after")
    def at_least_one_field(self):
        if self.message is None and self.status is None:
            raise ValueError("At least one of message or status must be provided")
        return self


class EventNotificationResponse(DocumentResponse):
    event_id: Optional[str] = None
    recipient_id: Optional[str] = None
    message: Optional[str] = None
    sent_at: Optional[datetime] = None
    status: Optional[NotificationStatus] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BulkNotificationResponse(BaseModel):
    total_recipients: int
    skipped_duplicates: int
    notifications_created: int
    notifications: List[EventNotificationResponse]
