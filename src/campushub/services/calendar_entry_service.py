"""
# Calendar Entry Service

Calendar entries are users' bookmarks of school events, unique per (user, event).
"""

from typing import Any, Dict, Optional

from fastapi import status

from campushub.database import db_manager
from campushub.managers.logging_manager import get_logger
from campushub.models.audit_log_models import ActionType
from campushub.models.calendar_entry_models import (
    CalendarEntryDocument,
    CalendarEntryResponse,
    CalendarEntryWithEvent,
    CalendarSortField,
    CreateCalendarEntryRequest,
    UpdateCalendarEntryRequest,
)
from campushub.models.common import utc_now
from campushub.models.school_event_models import SchoolEventResponse
from campushub.services.audit_log_service import audit_log_service
from campushub.services.school_event_service import school_event_service
from campushub.services.user_service import user_service
from campushub.utils.exceptions import AppError
from campushub.utils.query_utils import page_skip, parse_object_id, sort_direction, total_pages

logger = get_logger(prefix="[CalendarEntryService]")

DUPLICATE_ENTRY_MESSAGE = "Calendar entry already exists for this event"


class CalendarEntryService:
    def __init__(self):
        self.collection_name = "calendar_entries"

    def _entries(self):
        return db_manager.get_collection(self.collection_name)

    async def _get_or_404(self, entry_id: str) -> Dict[str, Any]:
        oid = parse_object_id(entry_id, "calendar entry")
        entry = await self._entries().find_one({"_id": oid})
        if not entry:
            raise AppError("Calendar entry not found", status.HTTP_404_NOT_FOUND)
        return entry

    async def _check_references(self, user_id: str, event_id: str) -> Dict[str, Any]:
        if not await user_service.find_user(user_id):
            raise AppError("User not found", status.HTTP_404_NOT_FOUND)
        return await school_event_service.get_or_404(event_id, message="Event not found")

    async def create_entry(self, request: CreateCalendarEntryRequest, actor_id: str) -> CalendarEntryWithEvent:
        created_by = request.created_by or actor_id
        event = await self._check_references(created_by, request.event_id)

        entries = self._entries()
        if await entries.find_one({"created_by": created_by, "event_id": request.event_id}, {"_id": 1}):
            raise AppError(DUPLICATE_ENTRY_MESSAGE, status.HTTP_409_CONFLICT)

        entry = CalendarEntryDocument(event_id=request.event_id, created_by=created_by)
        doc = entry.model_dump()
        result = await entries.insert_one(doc)
        doc["_id"] = result.inserted_id

        await audit_log_service.log_action(actor_id, ActionType.CREATE_CALENDAR_ENTRY)
        logger.info("Calendar entry %s created for user %s", result.inserted_id, created_by)
        return CalendarEntryWithEvent(
            calendar_entry=CalendarEntryResponse.from_document(doc),
            event=SchoolEventResponse.from_document(event),
        )

    async def list_entries(
        self,
        actor_id: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
        event_id: Optional[str] = None,
        created_by: Optional[str] = None,
        sort_by: CalendarSortField = CalendarSortField.CREATED_AT,
        order: str = "desc",
    ) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if event_id:
            parse_object_id(event_id, "event")
            query["event_id"] = event_id
        if created_by:
            parse_object_id(created_by, "user")
            query["created_by"] = created_by

        entries = self._entries()
        total = await entries.count_documents(query)
        cursor = (
            entries.find(query)
            .sort(CalendarSortField(sort_by).value, sort_direction(order))
            .skip(page_skip(page, limit))
            .limit(limit)
        )
        docs = await cursor.to_list(length=None)

        await audit_log_service.log_action(actor_id, ActionType.VIEW_CALENDAR_ENTRIES)
        return {
            "entries": [CalendarEntryResponse.from_document(doc) for doc in docs],
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": total_pages(total, limit),
        }

    async def get_entry(self, entry_id: str, actor_id: Optional[str] = None) -> CalendarEntryResponse:
        entry = await self._get_or_404(entry_id)
        await audit_log_service.log_action(actor_id, ActionType.VIEW_CALENDAR_ENTRY_DETAILS)
        return CalendarEntryResponse.from_document(entry)

    async def update_entry(
        self, entry_id: str, request: UpdateCalendarEntryRequest, actor_id: str
    ) -> CalendarEntryResponse:
        entry = await self._get_or_404(entry_id)
        await self._check_references(request.created_by, request.event_id)

        entries = self._entries()
        conflict = await entries.find_one(
            {"created_by": request.created_by, "event_id": request.event_id, "_id": {"$ne": entry["_id"]}},
            {"_id": 1},
        )
        if conflict:
            raise AppError(DUPLICATE_ENTRY_MESSAGE, status.HTTP_409_CONFLICT)

        updates = {"event_id": request.event_id, "created_by": request.created_by, "updated_at": utc_now()}
        await entries.update_one({"_id": entry["_id"]}, {"$set": updates})
        entry.update(updates)

        await audit_log_service.log_action(actor_id, ActionType.UPDATE_CALENDAR_ENTRY)
        logger.info("Calendar entry %s updated by %s", entry_id, actor_id)
        return CalendarEntryResponse.from_document(entry)

    async def delete_entry(self, entry_id: str, actor_id: str) -> None:
        entry = await self._get_or_404(entry_id)
        await self._entries().delete_one({"_id": entry["_id"]})
        await audit_log_service.log_action(actor_id, ActionType.DELETE_CALENDAR_ENTRY)
        logger.info("Calendar entry %s deleted by %s", entry_id, actor_id)


# Global instance
calendar_entry_service = CalendarEntryService()
