"""
# School Event Routes

Listing and reading events is public (guests are admitted); everything else is admin-only.
Static paths (`/recent`, `/filter/date-range`) are declared before `/{event_id}`.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from campushub.managers.logging_manager import get_logger
from campushub.models.school_event_models import (
    CreateSchoolEventRequest,
    DateRangeRequest,
    EventListType,
    EventOrganizer,
    EventSortField,
    UpdateSchoolEventRequest,
)
from campushub.models.common import SortOrder
from campushub.models.user_models import CurrentUser, UserRole
from campushub.routes.auth.dependencies import authorize, optional_authenticate
from campushub.services.school_event_service import school_event_service
from campushub.utils.exceptions import AppError
from campushub.utils.responses import success_response

logger = get_logger(prefix="[School Event Routes]")

router = APIRouter(prefix="/school-events", tags=["School Events"])

require_admin = authorize(UserRole.ADMIN.value)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event(request: CreateSchoolEventRequest, current_user: CurrentUser = Depends(require_admin)):
    try:
        event = await school_event_service.create_event(request, current_user.id)
        return success_response("School event created successfully", event)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to create school event: %s", e, exc_info=True)
        raise


@router.get("")
async def list_events(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    title: Optional[str] = None,
    venue: Optional[str] = None,
    organized_by: Optional[EventOrganizer] = None,
    date: Optional[datetime] = None,
    type: EventListType = EventListType.ALL,
    sort_by: EventSortField = EventSortField.DATE,
    order: SortOrder = SortOrder.ASC,
    current_user: CurrentUser = Depends(optional_authenticate),
):
    try:
        result = await school_event_service.list_events(
            actor_id=current_user.id,
            page=page,
            limit=limit,
            title=title,
            venue=venue,
            organized_by=organized_by.value if organized_by else None,
            date=date,
            type=type,
            sort_by=sort_by,
            order=order.value,
        )
        return success_response("School events retrieved successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to list school events: %s", e, exc_info=True)
        raise


@router.post("/filter/date-range")
async def filter_events_by_date_range(request: DateRangeRequest, current_user: CurrentUser = Depends(require_admin)):
    try:
        result = await school_event_service.filter_by_date_range(request, current_user.id)
        return success_response("School events retrieved successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to filter school events by date range: %s", e, exc_info=True)
        raise


@router.get("/recent")
async def recent_events(limit: int = Query(5, ge=1, le=50), current_user: CurrentUser = Depends(require_admin)):
    try:
        result = await school_event_service.recent_events(current_user.id, limit=limit)
        return success_response("Recent school events retrieved successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to fetch recent school events: %s", e, exc_info=True)
        raise


@router.get("/{event_id}")
async def get_event(event_id: str, current_user: CurrentUser = Depends(optional_authenticate)):
    try:
        event = await school_event_service.get_event(event_id, current_user.id)
        return success_response("School event retrieved successfully", event)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to get school event %s: %s", event_id, e, exc_info=True)
        raise


@router.patch("/{event_id}")
async def update_event(
    event_id: str, request: UpdateSchoolEventRequest, current_user: CurrentUser = Depends(require_admin)
):
    try:
        event = await school_event_service.update_event(event_id, request, current_user.id)
        return success_response("School event updated successfully", event)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to update school event %s: %s", event_id, e, exc_info=True)
        raise


@router.delete("/{event_id}")
async def delete_event(event_id: str, current_user: CurrentUser = Depends(require_admin)):
    try:
        await school_event_service.delete_event(event_id, current_user.id)
        return success_response("School event deleted successfully")
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to delete school event %s: %s", event_id, e, exc_info=True)
        raise
