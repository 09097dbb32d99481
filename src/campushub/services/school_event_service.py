"""
# School Event Service

Campus events organized by the administration or a department.

## Listing

`list_events()` filters by title/venue (case-insensitive), organizer and calendar day, and
splits events by `type`:

| type | filter | default order |
|------|--------|---------------|
| `all` | none | `sort_by` / `order` |
| `upcoming` | `date >= now` | date ascending |
| `past` | `date < now` | date descending |

Requesting a page beyond the last one is an error rather than an empty page.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import status
from pymongo import ASCENDING, DESCENDING

from campushub.database import db_manager
from campushub.managers.logging_manager import get_logger
from campushub.models.audit_log_models import ActionType
from campushub.models.common import utc_now
from campushub.models.school_event_models import (
    CreateSchoolEventRequest,
    DateRangeRequest,
    EventListType,
    EventSortField,
    SchoolEventDocument,
    SchoolEventListResponse,
    SchoolEventResponse,
    UPDATABLE_EVENT_FIELDS,
    UpdateSchoolEventRequest,
)
from campushub.services.audit_log_service import audit_log_service
from campushub.utils.exceptions import AppError
from campushub.utils.query_utils import build_event_filter, page_skip, parse_object_id, sort_direction, total_pages

logger = get_logger(prefix="[SchoolEventService]")


class SchoolEventService:
    def __init__(self):
        self.collection_name = "school_events"

    def _events(self):
        return db_manager.get_collection(self.collection_name)

    async def get_or_404(self, event_id: str, message: str = "School event not found") -> Dict[str, Any]:
        oid = parse_object_id(event_id, "event")
        event = await self._events().find_one({"_id": oid})
        if not event:
            raise AppError(message, status.HTTP_404_NOT_FOUND)
        return event

    async def create_event(self, request: CreateSchoolEventRequest, actor_id: str) -> SchoolEventResponse:
        if request.date < utc_now():
            raise AppError("Event date cannot be in the past", status.HTTP_400_BAD_REQUEST)

        event = SchoolEventDocument(**request.model_dump())
        doc = event.model_dump()
        result = await self._events().insert_one(doc)
        doc["_id"] = result.inserted_id

        await audit_log_service.log_action(actor_id, ActionType.CREATE_EVENT)
        logger.info("School event %s (%s) created by %s", event.title, result.inserted_id, actor_id)
        return SchoolEventResponse.from_document(doc)

    async def list_events(
        self,
        actor_id: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
        title: Optional[str] = None,
        venue: Optional[str] = None,
        organized_by: Optional[str] = None,
        date: Optional[datetime] = None,
        type: EventListType = EventListType.ALL,
        sort_by: EventSortField = EventSortField.DATE,
        order: str = "asc",
    ) -> SchoolEventListResponse:
        """
        Paginated event listing for anyone, including guests.

        Raises:
            AppError(400): When `page` is beyond the last page.
        """
        query = build_event_filter(title=title, venue=venue, organized_by=organized_by, date=date)
        now = utc_now()
        list_type = EventListType(type)

        if list_type == EventListType.UPCOMING:
            date_filter = query.get("date", {})
            query["date"] = {**date_filter, "$gte": max(date_filter.get("$gte", now), now)}
            sort_spec = [("date", ASCENDING)]
        elif list_type == EventListType.PAST:
            date_filter = query.get("date", {})
            query["date"] = {**date_filter, "$lt": min(date_filter.get("$lt", now), now)}
            sort_spec = [("date", DESCENDING)]
        else:
            sort_spec = [(EventSortField(sort_by).value, sort_direction(order))]

        events = self._events()
        total = await events.count_documents(query)
        pages = total_pages(total, limit)
        if pages > 0 and page > pages:
            raise AppError(f"Invalid page number. Maximum page is {pages}.", status.HTTP_400_BAD_REQUEST)

        cursor = events.find(query).sort(sort_spec).skip(page_skip(page, limit)).limit(limit)
        docs = await cursor.to_list(length=None)

        await audit_log_service.log_action(actor_id, ActionType.VIEW_EVENTS)
        return SchoolEventListResponse(
            events=[SchoolEventResponse.from_document(doc) for doc in docs],
            total=total,
            page=page,
            limit=limit,
            total_pages=pages,
        )

    async def get_event(self, event_id: str, actor_id: Optional[str] = None) -> SchoolEventResponse:
        event = await self.get_or_404(event_id)
        await audit_log_service.log_action(actor_id, ActionType.VIEW_EVENT_DETAILS)
        return SchoolEventResponse.from_document(event)

    async def filter_by_date_range(self, request: DateRangeRequest, actor_id: str) -> Dict[str, Any]:
        query = {"date": {"$gte": request.start_date, "$lte": request.end_date}}
        docs = await self._events().find(query).sort("date", ASCENDING).to_list(length=None)

        await audit_log_service.log_action(actor_id, ActionType.FILTER_EVENTS_BY_DATE_RANGE)
        return {
            "events": [SchoolEventResponse.from_document(doc) for doc in docs],
            "total": len(docs),
            "start_date": request.start_date,
            "end_date": request.end_date,
        }

    async def recent_events(self, actor_id: str, limit: int = 5) -> Dict[str, Any]:
        docs = await self._events().find({}).sort("created_at", DESCENDING).limit(limit).to_list(length=None)
        await audit_log_service.log_action(actor_id, ActionType.VIEW_RECENT_EVENTS)
        return {"events": [SchoolEventResponse.from_document(doc) for doc in docs], "limit": limit}

    async def update_event(
        self, event_id: str, request: UpdateSchoolEventRequest, actor_id: str
    ) -> SchoolEventResponse:
        disallowed = request.disallowed_fields()
        if disallowed:
            raise AppError(
                f"The following fields cannot be updated: {', '.join(disallowed)}", status.HTTP_400_BAD_REQUEST
            )

        event = await self.get_or_404(event_id)
        if request.date and request.date < utc_now():
            raise AppError("Cannot update event to a past date", status.HTTP_400_BAD_REQUEST)

        updates = request.model_dump(exclude_none=True, include=set(UPDATABLE_EVENT_FIELDS))
        updates["updated_at"] = utc_now()
        await self._events().update_one({"_id": event["_id"]}, {"$set": updates})
        event.update(updates)

        await audit_log_service.log_action(actor_id, ActionType.UPDATE_EVENT)
        logger.info("School event %s updated by %s", event_id, actor_id)
        return SchoolEventResponse.from_document(event)

    async def delete_event(self, event_id: str, actor_id: str) -> None:
        event = await self.get_or_404(event_id)
        await self._events().delete_one({"_id": event["_id"]})
        await audit_log_service.log_action(actor_id, ActionType.DELETE_EVENT)
        logger.info("School event %s deleted by %s", event_id, actor_id)


# Global instance
school_event_service = SchoolEventService()
