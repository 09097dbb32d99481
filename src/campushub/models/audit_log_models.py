"""
# Audit Log Models

Audit entries are append-only `(user, action)` pairs. `ActionType` enumerates every action
string the services record, grouped by resource; the values are the human-readable labels
shown in the admin panel.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from campushub.models.common import utc_now
from campushub.models.user_models import UserSummary


class ActionType(str, Enum):
    # Auth
    VIEW_PROFILE = "View Profile"
    SIGN_UP = "Sign Up"
    SIGN_IN = "Sign In"
    RESET_PASSWORD = "Reset Password"
    LOGOUT = "Logout"

    # Users
    CREATE_USER = "Create User"
    VIEW_USERS = "View Users"
    VIEW_USER_DETAILS = "View User Details"
    UPDATE_USER = "Update User"
    DELETE_USER = "Delete User"

    # Organizations
    CREATE_ORGANIZATION = "Create Organization"
    VIEW_ORGANIZATIONS = "View Organizations"
    VIEW_ORGANIZATION_DETAILS = "View Organization Details"
    UPDATE_ORGANIZATION = "Update Organization"
    DELETE_ORGANIZATION = "Delete Organization"

    # Events
    CREATE_EVENT = "Create Event"
    VIEW_EVENTS = "View Events"
    FILTER_EVENTS_BY_DATE_RANGE = "Filter Events by Date Range"
    VIEW_RECENT_EVENTS = "View Recent Events"
    VIEW_EVENT_DETAILS = "View Event Details"
    UPDATE_EVENT = "Update Event"
    DELETE_EVENT = "Delete Event"

    # Notifications
    CREATE_NOTIFICATION = "Create Notification"
    CREATE_NOTIFICATIONS_BULK = "Create Notifications (Bulk)"
    VIEW_NOTIFICATIONS = "View Notifications"
    VIEW_NOTIFICATION_DETAILS = "View Notification Details"
    UPDATE_NOTIFICATION = "Update Notification"
    DELETE_NOTIFICATION = "Delete Notification"

    # Reports
    CREATE_REPORT = "Create Report"
    VIEW_REPORTS = "View Reports"
    VIEW_REPORT_DETAILS = "View Report Details"
    DOWNLOAD_REPORTS = "Download Reports"
    UPDATE_REPORT_STATUS = "Update Report Status"
    DELETE_REPORT = "Delete Report"

    # OTP
    CLEANUP_OTP_RECORDS = "Cleanup OTP Records"

    # Calendar
    CREATE_CALENDAR_ENTRY = "Create Calendar Entry"
    VIEW_CALENDAR_ENTRIES = "View Calendar Entries"
    VIEW_CALENDAR_ENTRY_DETAILS = "View Calendar Entry Details"
    UPDATE_CALENDAR_ENTRY = "Update Calendar Entry"
    DELETE_CALENDAR_ENTRY = "Delete Calendar Entry"

    # Officers
    CREATE_OFFICER = "Create Officer"
    VIEW_OFFICERS = "View Officers"
    VIEW_OFFICER_DETAILS = "View Officer Details"
    UPDATE_OFFICER = "Update Officer"
    DELETE_OFFICER = "Delete Officer"


class AuditLogDocument(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    user_id: str = Field(..., description="Acting user id")
    action: ActionType
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class AuditLogResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    user: Optional[UserSummary] = None
    action: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
