"""
# Event Notification Routes

Admins send SMS notifications about school events, singly or in bulk. Admins and officers may
read them. `/sms-balance` reports the remaining gateway credit.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from campushub.managers.logging_manager import get_logger
from campushub.models.common import SortOrder
from campushub.models.event_notification_models import (
    BulkNotificationRequest,
    CreateNotificationRequest,
    NotificationSortField,
    NotificationStatus,
    UpdateNotificationRequest,
)
from campushub.models.user_models import CurrentUser, UserRole
from campushub.routes.auth.dependencies import authorize
from campushub.services.event_notification_service import event_notification_service
from campushub.utils.exceptions import AppError
from campushub.utils.responses import success_response

logger = get_logger(prefix="[Event Notification Routes]")

router = APIRouter(prefix="/event-notifications", tags=["Event Notifications"])

require_admin = authorize(UserRole.ADMIN.value)
require_admin_or_officer = authorize(UserRole.ADMIN.value, UserRole.OFFICER.value)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_notification(request: CreateNotificationRequest, current_user: CurrentUser = Depends(require_admin)):
    try:
        notification = await event_notification_service.create_notification(request, current_user.id)
        return success_response("Notification created successfully", notification)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to create notification: %s", e, exc_info=True)
        raise


@router.post("/bulk", status_code=status.HTTP_201_CREATED)
async def create_bulk_notifications(
    request: BulkNotificationRequest, current_user: CurrentUser = Depends(require_admin)
):
    try:
        result = await event_notification_service.create_bulk(request, current_user.id)
        return success_response("Bulk notifications created successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to create bulk notifications for event %s: %s", request.event_id, e, exc_info=True)
        raise


@router.get("/sms-balance")
async def sms_balance(current_user: CurrentUser = Depends(require_admin)):
    try:
        balance = await event_notification_service.sms_balance()
        return success_response("SMS balance retrieved successfully", balance)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to fetch SMS balance: %s", e, exc_info=True)
        raise


@router.get("")
async def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    event_id: Optional[str] = None,
    recipient_id: Optional[str] = None,
    status: Optional[NotificationStatus] = None,
    sort_by: NotificationSortField = NotificationSortField.SENT_AT,
    order: SortOrder = SortOrder.DESC,
    fields: Optional[str] = Query(None, description="Comma-separated projection"),
    current_user: CurrentUser = Depends(require_admin_or_officer),
):
    try:
        result = await event_notification_service.list_notifications(
            current_user.id,
            page=page,
            limit=limit,
            event_id=event_id,
            recipient_id=recipient_id,
            status_filter=status.value if status else None,
            sort_by=sort_by,
            order=order.value,
            fields=fields,
        )
        return success_response("Notifications retrieved successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to list notifications: %s", e, exc_info=True)
        raise


@router.get("/{notification_id}")
async def get_notification(notification_id: str, current_user: CurrentUser = Depends(require_admin_or_officer)):
    try:
        notification = await event_notification_service.get_notification(notification_id, current_user.id)
        return success_response("Notification retrieved successfully", notification)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to get notification %s: %s", notification_id, e, exc_info=True)
        raise


@router.patch("/{notification_id}")
async def update_notification(
    notification_id: str, request: UpdateNotificationRequest, current_user: CurrentUser = Depends(require_admin)
):
    try:
        notification = await event_notification_service.update_notification(notification_id, request, current_user.id)
        return success_response("Notification updated successfully", notification)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to update notification %s: %s", notification_id, e, exc_info=True)
        raise


@router.delete("/{notification_id}")
async def delete_notification(notification_id: str, current_user: CurrentUser = Depends(require_admin)):
    try:
        await event_notification_service.delete_notification(notification_id, current_user.id)
        return success_response("Notification deleted successfully")
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to delete notification %s: %s", notification_id, e, exc_info=True)
        raise
