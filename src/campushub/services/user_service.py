"""
# User Service

Administrative management of user accounts.

At least one `admin` must always exist: the last remaining admin can neither be deleted nor
have their role changed.
"""

from typing import Any, Dict, Optional

from bson import ObjectId
from fastapi import status
from pymongo import DESCENDING

from campushub.database import db_manager
from campushub.managers.logging_manager import get_logger
from campushub.models.audit_log_models import ActionType
from campushub.models.common import utc_now
from campushub.models.user_models import (
    CreateUserRequest,
    UpdateUserRequest,
    UserDocument,
    UserListResponse,
    UserResponse,
    UserRole,
)
from campushub.services.audit_log_service import audit_log_service
from campushub.services.auth_service import auth_service
from campushub.utils.exceptions import AppError
from campushub.utils.query_utils import page_skip, parse_object_id, regex_filter
from campushub.utils.security_utils import get_password_hash

logger = get_logger(prefix="[UserService]")

USER_PROJECTION = {"password": 0, "password_reset_token": 0, "password_reset_expires": 0}


class UserService:
    def __init__(self):
        self.collection_name = "users"

    def _users(self):
        return db_manager.get_collection(self.collection_name)

    async def _get_or_404(self, user_id: str) -> Dict[str, Any]:
        oid = parse_object_id(user_id, "user")
        user = await self._users().find_one({"_id": oid}, USER_PROJECTION)
        if not user:
            raise AppError("User not found", status.HTTP_404_NOT_FOUND)
        return user

    async def _is_last_admin(self, user: Dict[str, Any]) -> bool:
        if user.get("role") != UserRole.ADMIN.value:
            return False
        return await self._users().count_documents({"role": UserRole.ADMIN.value}) <= 1

    async def create_user(self, request: CreateUserRequest, actor_id: str) -> UserResponse:
        await auth_service.ensure_unique(request.username, request.email)

        user = UserDocument(
            username=request.username,
            email=request.email,
            password=get_password_hash(request.password),
            role=request.role,
            phone_number=request.phone_number,
        )
        doc = user.model_dump()
        result = await self._users().insert_one(doc)
        doc["_id"] = result.inserted_id

        await audit_log_service.log_action(actor_id, ActionType.CREATE_USER)
        logger.info("User %s created by %s", result.inserted_id, actor_id)
        return UserResponse.from_document(doc)

    async def list_users(
        self,
        actor_id: str,
        page: int = 1,
        limit: int = 10,
        email: Optional[str] = None,
        username: Optional[str] = None,
        role: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> UserListResponse:
        query: Dict[str, Any] = {}
        if email:
            query["email"] = regex_filter(email)
        if username:
            query["username"] = regex_filter(username)
        if role:
            query["role"] = role
        if phone_number:
            query["phone_number"] = phone_number

        users = self._users()
        total = await users.count_documents(query)
        cursor = (
            users.find(query, USER_PROJECTION)
            .sort("created_at", DESCENDING)
            .skip(page_skip(page, limit))
            .limit(limit)
        )
        docs = await cursor.to_list(length=None)

        await audit_log_service.log_action(actor_id, ActionType.VIEW_USERS)
        return UserListResponse(
            data=[UserResponse.from_document(doc) for doc in docs], total=total, page=page, limit=limit
        )

    async def get_user(self, user_id: str, actor_id: str) -> UserResponse:
        user = await self._get_or_404(user_id)
        await audit_log_service.log_action(actor_id, ActionType.VIEW_USER_DETAILS)
        return UserResponse.from_document(user)

    async def update_user(self, user_id: str, request: UpdateUserRequest, actor_id: str) -> UserResponse:
        user = await self._get_or_404(user_id)
        updates = request.model_dump(exclude_none=True)

        if "role" in updates and updates["role"] != UserRole.ADMIN.value and await self._is_last_admin(user):
            raise AppError("Cannot update the last admin", status.HTTP_403_FORBIDDEN)

        await auth_service.ensure_unique(updates.get("username"), updates.get("email"), exclude_id=user["_id"])

        if "email" in updates:
            updates["email"] = updates["email"].lower()
        if "password" in updates:
            updates["password"] = get_password_hash(updates["password"])
        updates["updated_at"] = utc_now()

        await self._users().update_one({"_id": user["_id"]}, {"$set": updates})
        user.update({key: value for key, value in updates.items() if key != "password"})

        await audit_log_service.log_action(actor_id, ActionType.UPDATE_USER)
        logger.info("User %s updated by %s", user_id, actor_id)
        return UserResponse.from_document(user)

    async def delete_user(self, user_id: str, actor_id: str) -> None:
        user = await self._get_or_404(user_id)
        if await self._is_last_admin(user):
            raise AppError("Cannot delete the last admin", status.HTTP_403_FORBIDDEN)

        await self._users().delete_one({"_id": user["_id"]})
        await audit_log_service.log_action(actor_id, ActionType.DELETE_USER)
        logger.info("User %s deleted by %s", user_id, actor_id)

    async def find_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a user by id without raising; invalid ids count as missing."""
        if not ObjectId.is_valid(user_id):
            return None
        return await self._users().find_one({"_id": ObjectId(user_id)}, USER_PROJECTION)


# Global instance
user_service = UserService()
