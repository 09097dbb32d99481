"""
# Audit Log Service

This module provides the **audit trail** for campushub: an append-only record of which user
performed which action. Every service operation that acts on behalf of an authenticated user
records exactly one entry through `audit_log_service.log_action()`.

## Key Features

### 1. Action Logging
- **Standardized actions**: only `ActionType` labels are accepted.
- **Non-blocking**: a failed audit write is logged and never fails the request that caused it.

### 2. Audit Retrieval
- **Filtering**: by user and action.
- **Sorting/projection**: `sort` and `fields` query strings.
- **Population**: each entry carries the acting user's username, email and role.

## Usage Example

```python
await audit_log_service.log_action(current_user.id, ActionType.CREATE_OFFICER)
```
"""

from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from pymongo.errors import PyMongoError

from campushub.database import db_manager
from campushub.managers.logging_manager import get_logger
from campushub.models.audit_log_models import ActionType, AuditLogDocument, AuditLogResponse
from campushub.models.user_models import user_summary
from campushub.utils.query_utils import page_skip, parse_projection, parse_sort

logger = get_logger(prefix="[AuditLogService]")


class AuditLogService:
    """Records and retrieves audit log entries in the `audit_logs` collection."""

    def __init__(self):
        self.collection_name = "audit_logs"

    async def log_action(self, user_id: Optional[str], action: Union[ActionType, str]) -> None:
        """
        Append an audit entry.

        Guests (no `user_id`) are not recorded.

        Args:
            user_id: Id of the acting user.
            action: One of the `ActionType` labels.
        """
        if not user_id:
            return
        try:
            entry = AuditLogDocument(user_id=str(user_id), action=ActionType(action))
            collection = db_manager.get_collection(self.collection_name)
            await collection.insert_one(entry.model_dump())
            logger.debug("Audit entry recorded: %s by %s", entry.action, user_id)
        except (PyMongoError, ValueError) as e:
            logger.error("Failed to record audit entry %s for %s: %s", action, user_id, e, exc_info=True)

    async def list_logs(
        self,
        user_id: Optional[str] = None,
        action: Optional[str] = None,
        sort: Optional[str] = None,
        fields: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Dict[str, Any]:
        """
        List audit entries, newest first by default, with the acting user populated.

        Returns:
            `{"logs": [...], "total": int, "page": int, "limit": int}`
        """
        query: Dict[str, Any] = {}
        if user_id:
            query["user_id"] = user_id
        if action:
            query["action"] = action

        projection = parse_projection(fields)
        if projection is not None:
            projection["user_id"] = 1

        collection = db_manager.get_collection(self.collection_name)
        total = await collection.count_documents(query)
        cursor = (
            collection.find(query, projection)
            .sort(parse_sort(sort, "-created_at"))
            .skip(page_skip(page, limit))
            .limit(limit)
        )
        docs = await cursor.to_list(length=None)

        users = await self._load_users({doc.get("user_id") for doc in docs})
        logs: List[AuditLogResponse] = []
        for doc in docs:
            logs.append(
                AuditLogResponse(
                    id=str(doc["_id"]),
                    user_id=doc.get("user_id"),
                    user=user_summary(users.get(doc.get("user_id"))),
                    action=doc.get("action"),
                    created_at=doc.get("created_at"),
                    updated_at=doc.get("updated_at"),
                )
            )
        return {"logs": logs, "total": total, "page": page, "limit": limit}

    async def _load_users(self, user_ids) -> Dict[str, Dict[str, Any]]:
        object_ids = [ObjectId(uid) for uid in user_ids if uid and ObjectId.is_valid(uid)]
        if not object_ids:
            return {}
        users = db_manager.get_collection("users")
        cursor = users.find({"_id": {"$in": object_ids}}, {"username": 1, "email": 1, "role": 1})
        return {str(doc["_id"]): doc async for doc in cursor}


# Global instance
audit_log_service = AuditLogService()
