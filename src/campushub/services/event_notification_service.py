"""
# Event Notification Service

Notifications tell users about school events by SMS.

## Delivery

Each notification is inserted first and then handed to the SMS gateway. If the gateway call
fails the record is updated to `failed`; the API request itself still succeeds, so a flaky
provider never loses the notification record.

## Bulk sends

`create_bulk()` deduplicates the recipient list, rejects unknown recipients, and skips users
who already have a notification for the event. If every recipient is skipped the request is a
conflict.
"""

from typing import Any, Dict, List, Optional

import httpx
from bson import ObjectId
from fastapi import status

from campushub.database import db_manager
from campushub.managers.logging_manager import get_logger
from campushub.models.audit_log_models import ActionType
from campushub.models.common import utc_now
from campushub.models.event_notification_models import (
    NOTIFICATION_FIELDS,
    BulkNotificationRequest,
    BulkNotificationResponse,
    CreateNotificationRequest,
    EventNotificationDocument,
    EventNotificationResponse,
    NotificationSortField,
    NotificationStatus,
    UpdateNotificationRequest,
)
from campushub.services.audit_log_service import audit_log_service
from campushub.services.school_event_service import school_event_service
from campushub.services.sms_service import sms_service
from campushub.services.user_service import user_service
from campushub.utils.exceptions import AppError
from campushub.utils.query_utils import page_skip, parse_object_id, parse_projection, sort_direction, total_pages

logger = get_logger(prefix="[EventNotificationService]")


class EventNotificationService:
    def __init__(self):
        self.collection_name = "event_notifications"

    def _notifications(self):
        return db_manager.get_collection(self.collection_name)

    async def _get_or_404(self, notification_id: str) -> Dict[str, Any]:
        oid = parse_object_id(notification_id, "notification")
        notification = await self._notifications().find_one({"_id": oid})
        if not notification:
            raise AppError("Notification not found", status.HTTP_404_NOT_FOUND)
        return notification

    async def _deliver(self, doc: Dict[str, Any], phone_number: Optional[str]) -> None:
        """Send the SMS for an inserted notification and persist the delivery status."""
        try:
            await sms_service.send(phone_number, doc["message"])
            delivery_status = NotificationStatus.SENT.value
        except (httpx.HTTPError, ValueError, AppError) as e:
            logger.warning("SMS delivery failed for notification %s: %s", doc["_id"], e)
            delivery_status = NotificationStatus.FAILED.value

        now = utc_now()
        await self._notifications().update_one(
            {"_id": doc["_id"]}, {"$set": {"status": delivery_status, "sent_at": now, "updated_at": now}}
        )
        doc.update({"status": delivery_status, "sent_at": now, "updated_at": now})

    async def create_notification(
        self, request: CreateNotificationRequest, actor_id: str
    ) -> EventNotificationResponse:
        await school_event_service.get_or_404(request.event_id, message="Event not found")
        recipient = await user_service.find_user(request.recipient_id)
        if not recipient:
            raise AppError("Recipient not found", status.HTTP_404_NOT_FOUND)

        doc = EventNotificationDocument(**request.model_dump()).model_dump()
        result = await self._notifications().insert_one(doc)
        doc["_id"] = result.inserted_id

        await self._deliver(doc, recipient.get("phone_number"))

        await audit_log_service.log_action(actor_id, ActionType.CREATE_NOTIFICATION)
        logger.info("Notification %s for event %s: %s", result.inserted_id, request.event_id, doc["status"])
        return EventNotificationResponse.from_document(doc)

    async def create_bulk(self, request: BulkNotificationRequest, actor_id: str) -> BulkNotificationResponse:
        await school_event_service.get_or_404(request.event_id, message="Event not found")

        recipient_ids: List[str] = list(dict.fromkeys(request.recipient_ids))
        cursor = db_manager.get_collection("users").find(
            {"_id": {"$in": [ObjectId(rid) for rid in recipient_ids]}}, {"phone_number": 1}
        )
        recipients = {str(user["_id"]): user async for user in cursor}

        missing = [rid for rid in recipient_ids if rid not in recipients]
        if missing:
            raise AppError(f"Some recipients not found: {', '.join(missing)}", status.HTTP_404_NOT_FOUND)

        notifications = self._notifications()
        existing_cursor = notifications.find(
            {"event_id": request.event_id, "recipient_id": {"$in": recipient_ids}}, {"recipient_id": 1}
        )
        already_notified = {doc["recipient_id"] async for doc in existing_cursor}

        targets = [rid for rid in recipient_ids if rid not in already_notified]
        if not targets:
            raise AppError("All recipients already have notifications for this event", status.HTTP_409_CONFLICT)

        docs = [
            EventNotificationDocument(event_id=request.event_id, recipient_id=rid, message=request.message).model_dump()
            for rid in targets
        ]
        result = await notifications.insert_many(docs)
        for doc, inserted_id in zip(docs, result.inserted_ids):
            doc["_id"] = inserted_id

        for doc in docs:
            await self._deliver(doc, recipients[doc["recipient_id"]].get("phone_number"))

        await audit_log_service.log_action(actor_id, ActionType.CREATE_NOTIFICATIONS_BULK)
        logger.info(
            "Bulk notifications for event %s: %d created, %d skipped",
            request.event_id,
            len(docs),
            len(already_notified),
        )
        return BulkNotificationResponse(
            total_recipients=len(recipient_ids),
            skipped_duplicates=len(already_notified),
            notifications_created=len(docs),
            notifications=[EventNotificationResponse.from_document(doc) for doc in docs],
        )

    async def list_notifications(
        self,
        actor_id: str,
        page: int = 1,
        limit: int = 10,
        event_id: Optional[str] = None,
        recipient_id: Optional[str] = None,
        status_filter: Optional[str] = None,
        sort_by: NotificationSortField = NotificationSortField.SENT_AT,
        order: str = "desc",
        fields: Optional[str] = None,
    ) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if event_id:
            parse_object_id(event_id, "event")
            query["event_id"] = event_id
        if recipient_id:
            parse_object_id(recipient_id, "recipient")
            query["recipient_id"] = recipient_id
        if status_filter:
            query["status"] = status_filter

        projection = parse_projection(fields, allowed=NOTIFICATION_FIELDS)
        notifications = self._notifications()
        total = await notifications.count_documents(query)
        cursor = (
            notifications.find(query, projection)
            .sort(NotificationSortField(sort_by).value, sort_direction(order))
            .skip(page_skip(page, limit))
            .limit(limit)
        )
        docs = await cursor.to_list(length=None)

        await audit_log_service.log_action(actor_id, ActionType.VIEW_NOTIFICATIONS)
        return {
            "notifications": [EventNotificationResponse.from_document(doc) for doc in docs],
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": total_pages(total, limit),
        }

    async def get_notification(self, notification_id: str, actor_id: str) -> EventNotificationResponse:
        notification = await self._get_or_404(notification_id)
        await audit_log_service.log_action(actor_id, ActionType.VIEW_NOTIFICATION_DETAILS)
        return EventNotificationResponse.from_document(notification)

    async def update_notification(
        self, notification_id: str, request: UpdateNotificationRequest, actor_id: str
    ) -> EventNotificationResponse:
        notification = await self._get_or_404(notification_id)
        updates = request.model_dump(exclude_none=True)
        updates["updated_at"] = utc_now()

        await self._notifications().update_one({"_id": notification["_id"]}, {"$set": updates})
        notification.update(updates)

        await audit_log_service.log_action(actor_id, ActionType.UPDATE_NOTIFICATION)
        logger.info("Notification %s updated by %s", notification_id, actor_id)
        return EventNotificationResponse.from_document(notification)

    async def delete_notification(self, notification_id: str, actor_id: str) -> None:
        notification = await self._get_or_404(notification_id)
        await self._notifications().delete_one({"_id": notification["_id"]})
        await audit_log_service.log_action(actor_id, ActionType.DELETE_NOTIFICATION)
        logger.info("Notification %s deleted by %s", notification_id, actor_id)

    async def sms_balance(self) -> Dict[str, Any]:
        """Remaining Semaphore credit; gateway errors become a 502."""
        try:
            return await sms_service.get_balance()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to fetch SMS balance: %s", e, exc_info=True)
            raise AppError("Failed to fetch SMS balance", status.HTTP_502_BAD_GATEWAY)


# Global instance
event_notification_service = EventNotificationService()
