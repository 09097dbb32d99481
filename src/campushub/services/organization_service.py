"""
# Organization Service

Student organizations, each with a unique name and an assigned adviser.

Listing supports pagination, a comma-separated `sort` string (`-created_at` by default, a
leading `-` meaning descending), a `fields` projection and filtering by name or adviser.
Responses carry the adviser's username in place of the raw `adviser_id`.
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from fastapi import status

from campushub.database import db_manager
from campushub.managers.logging_manager import get_logger
from campushub.models.audit_log_models import ActionType
from campushub.models.common import utc_now
from campushub.models.organization_models import (
    CreateOrganizationRequest,
    OrganizationDocument,
    OrganizationListResponse,
    OrganizationPagination,
    OrganizationResponse,
    UpdateOrganizationRequest,
)
from campushub.services.audit_log_service import audit_log_service
from campushub.services.user_service import user_service
from campushub.utils.exceptions import AppError
from campushub.utils.query_utils import (
    page_skip,
    parse_object_id,
    parse_projection,
    parse_sort,
    regex_filter,
    total_pages,
)

logger = get_logger(prefix="[OrganizationService]")


class OrganizationService:
    def __init__(self):
        self.collection_name = "organizations"

    def _organizations(self):
        return db_manager.get_collection(self.collection_name)

    async def get_or_404(self, org_id: str) -> Dict[str, Any]:
        oid = parse_object_id(org_id, "organization")
        organization = await self._organizations().find_one({"_id": oid})
        if not organization:
            raise AppError("Organization not found", status.HTTP_404_NOT_FOUND)
        return organization

    async def _ensure_name_available(self, org_name: str, exclude_id: Optional[ObjectId] = None) -> None:
        query: Dict[str, Any] = {"org_name": org_name}
        if exclude_id:
            query["_id"] = {"$ne": exclude_id}
        if await self._organizations().find_one(query, {"_id": 1}):
            raise AppError("Organization name already exists", status.HTTP_400_BAD_REQUEST)

    async def _ensure_adviser(self, adviser_id: str) -> None:
        if not await user_service.find_user(adviser_id):
            raise AppError("The assigned adviser does not exist", status.HTTP_404_NOT_FOUND)

    async def _map_organizations(self, docs: List[Dict[str, Any]]) -> List[OrganizationResponse]:
        adviser_ids = [ObjectId(d["adviser_id"]) for d in docs if ObjectId.is_valid(d.get("adviser_id") or "")]
        advisers: Dict[str, str] = {}
        if adviser_ids:
            cursor = db_manager.get_collection("users").find({"_id": {"$in": adviser_ids}}, {"username": 1})
            advisers = {str(u["_id"]): u["username"] async for u in cursor}

        return [
            OrganizationResponse(
                id=str(doc["_id"]),
                org_name=doc.get("org_name"),
                description=doc.get("description"),
                adviser=advisers.get(doc.get("adviser_id")),
                created_at=doc.get("created_at"),
                updated_at=doc.get("updated_at"),
            )
            for doc in docs
        ]

    async def create_organization(self, request: CreateOrganizationRequest, actor_id: str) -> OrganizationResponse:
        await self._ensure_name_available(request.org_name)
        await self._ensure_adviser(request.adviser_id)

        organization = OrganizationDocument(**request.model_dump())
        doc = organization.model_dump()
        result = await self._organizations().insert_one(doc)
        doc["_id"] = result.inserted_id

        await audit_log_service.log_action(actor_id, ActionType.CREATE_ORGANIZATION)
        logger.info("Organization %s (%s) created by %s", organization.org_name, result.inserted_id, actor_id)
        return (await self._map_organizations([doc]))[0]

    async def list_organizations(
        self,
        actor_id: str,
        page: int = 1,
        limit: int = 10,
        sort: Optional[str] = None,
        fields: Optional[str] = None,
        org_name: Optional[str] = None,
        adviser_id: Optional[str] = None,
    ) -> OrganizationListResponse:
        query: Dict[str, Any] = {}
        if org_name:
            query["org_name"] = regex_filter(org_name)
        if adviser_id:
            parse_object_id(adviser_id, "adviser")
            query["adviser_id"] = adviser_id

        projection = parse_projection(fields)
        organizations = self._organizations()
        total = await organizations.count_documents(query)
        cursor = (
            organizations.find(query, projection)
            .sort(parse_sort(sort, "-created_at"))
            .skip(page_skip(page, limit))
            .limit(limit)
        )
        docs = await cursor.to_list(length=None)

        await audit_log_service.log_action(actor_id, ActionType.VIEW_ORGANIZATIONS)
        return OrganizationListResponse(
            organizations=await self._map_organizations(docs),
            pagination=OrganizationPagination(total=total, page=page, limit=limit, pages=total_pages(total, limit)),
        )

    async def get_organization(self, org_id: str, actor_id: str) -> OrganizationResponse:
        organization = await self.get_or_404(org_id)
        await audit_log_service.log_action(actor_id, ActionType.VIEW_ORGANIZATION_DETAILS)
        return (await self._map_organizations([organization]))[0]

    async def update_organization(
        self, org_id: str, request: UpdateOrganizationRequest, actor_id: str
    ) -> OrganizationResponse:
        organization = await self.get_or_404(org_id)
        updates = request.model_dump(exclude_none=True)

        if "org_name" in updates:
            await self._ensure_name_available(updates["org_name"], exclude_id=organization["_id"])
        if "adviser_id" in updates:
            await self._ensure_adviser(updates["adviser_id"])

        updates["updated_at"] = utc_now()
        await self._organizations().update_one({"_id": organization["_id"]}, {"$set": updates})
        organization.update(updates)

        await audit_log_service.log_action(actor_id, ActionType.UPDATE_ORGANIZATION)
        logger.info("Organization %s updated by %s", org_id, actor_id)
        return (await self._map_organizations([organization]))[0]

    async def delete_organization(self, org_id: str, actor_id: str) -> None:
        organization = await self.get_or_404(org_id)
        await self._organizations().delete_one({"_id": organization["_id"]})
        await audit_log_service.log_action(actor_id, ActionType.DELETE_ORGANIZATION)
        logger.info("Organization %s deleted by %s", org_id, actor_id)


# Global instance
organization_service = OrganizationService()
