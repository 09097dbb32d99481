"""
# Officer Service

Officer records bind a user to a position in an organization for a term.

## Business Rules

- Both the user and the organization must exist.
- A user holds at most one officer record per organization (409 on duplicates).
- `end_term` must be strictly after `start_term`.
- Updates may not move a record to another user or organization, may not push `start_term`
  later than it already is, and may not shorten `end_term`.
"""

from typing import Any, Dict, Optional

from fastapi import status

from campushub.database import db_manager
from campushub.managers.logging_manager import get_logger
from campushub.models.audit_log_models import ActionType
from campushub.models.common import PaginationMeta, as_utc, utc_now
from campushub.models.officer_models import (
    END_TERM_ORDER_MESSAGE,
    CreateOfficerRequest,
    OfficerDocument,
    OfficerResponse,
    OfficerSortField,
    UpdateOfficerRequest,
)
from campushub.services.audit_log_service import audit_log_service
from campushub.services.organization_service import organization_service
from campushub.services.user_service import user_service
from campushub.utils.exceptions import AppError
from campushub.utils.query_utils import page_skip, parse_object_id, sort_direction, total_pages

logger = get_logger(prefix="[OfficerService]")


class OfficerService:
    def __init__(self):
        self.collection_name = "officers"

    def _officers(self):
        return db_manager.get_collection(self.collection_name)

    async def _get_or_404(self, officer_id: str) -> Dict[str, Any]:
        oid = parse_object_id(officer_id, "officer")
        officer = await self._officers().find_one({"_id": oid})
        if not officer:
            raise AppError("Officer not found", status.HTTP_404_NOT_FOUND)
        return officer

    async def create_officer(self, request: CreateOfficerRequest, actor_id: str) -> OfficerResponse:
        if not await user_service.find_user(request.user_id):
            raise AppError("User not found", status.HTTP_404_NOT_FOUND)
        await organization_service.get_or_404(request.org_id)

        officers = self._officers()
        if await officers.find_one({"user_id": request.user_id, "org_id": request.org_id}, {"_id": 1}):
            raise AppError("User is already an officer of this organization", status.HTTP_409_CONFLICT)

        officer = OfficerDocument(**request.model_dump())
        doc = officer.model_dump()
        result = await officers.insert_one(doc)
        doc["_id"] = result.inserted_id

        await audit_log_service.log_action(actor_id, ActionType.CREATE_OFFICER)
        logger.info("Officer %s created for user %s in org %s", result.inserted_id, request.user_id, request.org_id)
        return OfficerResponse.from_document(doc)

    async def list_officers(
        self,
        actor_id: str,
        page: int = 1,
        limit: int = 10,
        org_id: Optional[str] = None,
        user_id: Optional[str] = None,
        position: Optional[str] = None,
        sort_by: OfficerSortField = OfficerSortField.CREATED_AT,
        order: str = "desc",
    ) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if org_id:
            parse_object_id(org_id, "organization")
            query["org_id"] = org_id
        if user_id:
            parse_object_id(user_id, "user")
            query["user_id"] = user_id
        if position:
            query["position"] = position

        officers = self._officers()
        total = await officers.count_documents(query)
        cursor = (
            officers.find(query)
            .sort(OfficerSortField(sort_by).value, sort_direction(order))
            .skip(page_skip(page, limit))
            .limit(limit)
        )
        docs = await cursor.to_list(length=None)

        await audit_log_service.log_action(actor_id, ActionType.VIEW_OFFICERS)
        return {
            "items": [OfficerResponse.from_document(doc) for doc in docs],
            "meta": PaginationMeta(page=page, limit=limit, total=total, total_pages=total_pages(total, limit)),
        }

    async def get_officer(self, officer_id: str, actor_id: str) -> OfficerResponse:
        officer = await self._get_or_404(officer_id)
        await audit_log_service.log_action(actor_id, ActionType.VIEW_OFFICER_DETAILS)
        return OfficerResponse.from_document(officer)

    async def update_officer(self, officer_id: str, request: UpdateOfficerRequest, actor_id: str) -> OfficerResponse:
        if request.user_id is not None:
            raise AppError("User ID cannot be updated", status.HTTP_400_BAD_REQUEST)
        if request.org_id is not None:
            raise AppError("Organization ID cannot be updated", status.HTTP_400_BAD_REQUEST)

        officer = await self._get_or_404(officer_id)
        current_start = as_utc(officer["start_term"])
        current_end = as_utc(officer["end_term"])

        if request.start_term and request.start_term > current_start:
            raise AppError("Cannot set start term after it has already begun", status.HTTP_400_BAD_REQUEST)
        if request.end_term and request.end_term < current_end:
            raise AppError("Cannot shorten end term past the existing date", status.HTTP_400_BAD_REQUEST)

        new_start = request.start_term or current_start
        new_end = request.end_term or current_end
        if new_end <= new_start:
            raise AppError(END_TERM_ORDER_MESSAGE, status.HTTP_400_BAD_REQUEST)

        updates = request.model_dump(exclude_none=True)
        updates["updated_at"] = utc_now()
        await self._officers().update_one({"_id": officer["_id"]}, {"$set": updates})
        officer.update(updates)

        await audit_log_service.log_action(actor_id, ActionType.UPDATE_OFFICER)
        logger.info("Officer %s updated by %s", officer_id, actor_id)
        return OfficerResponse.from_document(officer)

    async def delete_officer(self, officer_id: str, actor_id: str) -> None:
        officer = await self._get_or_404(officer_id)
        await self._officers().delete_one({"_id": officer["_id"]})
        await audit_log_service.log_action(actor_id, ActionType.DELETE_OFFICER)
        logger.info("Officer %s deleted by %s", officer_id, actor_id)


# Global instance
officer_service = OfficerService()
