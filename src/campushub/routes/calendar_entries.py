"""
# Calendar Entry Routes

Admins and advisers bookmark events onto a user's calendar. Reading is open to admins,
students, officers and guests.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from campushub.managers.logging_manager import get_logger
from campushub.models.calendar_entry_models import (
    CalendarSortField,
    CreateCalendarEntryRequest,
    UpdateCalendarEntryRequest,
)
from campushub.models.common import SortOrder
from campushub.models.user_models import CurrentUser, UserRole
from campushub.routes.auth.dependencies import GUEST_ROLE, authorize
from campushub.services.calendar_entry_service import calendar_entry_service
from campushub.utils.exceptions import AppError
from campushub.utils.responses import success_response

logger = get_logger(prefix="[Calendar Entry Routes]")

router = APIRouter(prefix="/calendar-entries", tags=["Calendar Entries"])

require_admin = authorize(UserRole.ADMIN.value)
allow_readers = authorize(UserRole.ADMIN.value, UserRole.STUDENT.value, UserRole.OFFICER.value, GUEST_ROLE)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_calendar_entry(
    request: CreateCalendarEntryRequest,
    current_user: CurrentUser = Depends(authorize(UserRole.ADMIN.value, UserRole.ADVISER.value)),
):
    try:
        result = await calendar_entry_service.create_entry(request, current_user.id)
        return success_response("Calendar entry created successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to create calendar entry: %s", e, exc_info=True)
        raise


@router.get("")
async def list_calendar_entries(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    event_id: Optional[str] = None,
    created_by: Optional[str] = None,
    sort_by: CalendarSortField = CalendarSortField.CREATED_AT,
    order: SortOrder = SortOrder.DESC,
    current_user: CurrentUser = Depends(allow_readers),
):
    try:
        result = await calendar_entry_service.list_entries(
            actor_id=current_user.id,
            page=page,
            limit=limit,
            event_id=event_id,
            created_by=created_by,
            sort_by=sort_by,
            order=order.value,
        )
        return success_response("Calendar entries retrieved successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to list calendar entries: %s", e, exc_info=True)
        raise


@router.get("/{entry_id}")
async def get_calendar_entry(entry_id: str, current_user: CurrentUser = Depends(allow_readers)):
    try:
        entry = await calendar_entry_service.get_entry(entry_id, current_user.id)
        return success_response("Calendar entry retrieved successfully", entry)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to get calendar entry %s: %s", entry_id, e, exc_info=True)
        raise


@router.put("/{entry_id}")
async def update_calendar_entry(
    entry_id: str, request: UpdateCalendarEntryRequest, current_user: CurrentUser = Depends(require_admin)
):
    try:
        entry = await calendar_entry_service.update_entry(entry_id, request, current_user.id)
        return success_response("Calendar entry updated successfully", entry)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to update calendar entry %s: %s", entry_id, e, exc_info=True)
        raise


@router.delete("/{entry_id}")
async def delete_calendar_entry(entry_id: str, current_user: CurrentUser = Depends(require_admin)):
    try:
        await calendar_entry_service.delete_entry(entry_id, current_user.id)
        return success_response("Calendar entry deleted successfully")
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to delete calendar entry %s: %s", entry_id, e, exc_info=True)
        raise
