"""Audit log read API (admin only)."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from campushub.managers.logging_manager import get_logger
from campushub.models.audit_log_models import ActionType
from campushub.models.user_models import CurrentUser, UserRole
from campushub.routes.auth.dependencies import authorize
from campushub.services.audit_log_service import audit_log_service
from campushub.utils.exceptions import AppError
from campushub.utils.responses import success_response

logger = get_logger(prefix="[Audit Log Routes]")

router = APIRouter(prefix="/audit-logs", tags=["Audit Logs"])


@router.get("")
async def list_audit_logs(
    user_id: Optional[str] = None,
    action: Optional[ActionType] = None,
    sort: Optional[str] = Query(None, description="Comma-separated fields, prefix with - for descending"),
    fields: Optional[str] = Query(None, description="Comma-separated projection"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    current_user: CurrentUser = Depends(authorize(UserRole.ADMIN.value)),
):
    try:
        result = await audit_log_service.list_logs(
            user_id=user_id,
            action=action.value if action else None,
            sort=sort,
            fields=fields,
            page=page,
            limit=limit,
        )
        return success_response("Audit logs retrieved successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to list audit logs for admin %s: %s", current_user.id, e, exc_info=True)
        raise
