"""
# Officer Routes

Administrator-only management of officer terms.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from campushub.managers.logging_manager import get_logger
from campushub.models.common import SortOrder
from campushub.models.officer_models import CreateOfficerRequest, OfficerSortField, UpdateOfficerRequest
from campushub.models.user_models import CurrentUser, UserRole
from campushub.routes.auth.dependencies import authorize
from campushub.services.officer_service import officer_service
from campushub.utils.exceptions import AppError
from campushub.utils.responses import success_response

logger = get_logger(prefix="[Officer Routes]")

router = APIRouter(prefix="/officers", tags=["Officers"])

require_admin = authorize(UserRole.ADMIN.value)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_officer(request: CreateOfficerRequest, current_user: CurrentUser = Depends(require_admin)):
    try:
        officer = await officer_service.create_officer(request, current_user.id)
        return success_response("Officer created successfully", officer)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to create officer: %s", e, exc_info=True)
        raise


@router.get("")
async def list_officers(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    org_id: Optional[str] = None,
    user_id: Optional[str] = None,
    position: Optional[str] = None,
    sort_by: OfficerSortField = OfficerSortField.CREATED_AT,
    order: SortOrder = SortOrder.DESC,
    current_user: CurrentUser = Depends(require_admin),
):
    try:
        result = await officer_service.list_officers(
            current_user.id,
            page=page,
            limit=limit,
            org_id=org_id,
            user_id=user_id,
            position=position,
            sort_by=sort_by,
            order=order.value,
        )
        return success_response("Officers retrieved successfully", result["items"], meta=result["meta"])
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to list officers: %s", e, exc_info=True)
        raise


@router.get("/{officer_id}")
async def get_officer(officer_id: str, current_user: CurrentUser = Depends(require_admin)):
    try:
        officer = await officer_service.get_officer(officer_id, current_user.id)
        return success_response("Officer retrieved successfully", officer)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to get officer %s: %s", officer_id, e, exc_info=True)
        raise


@router.patch("/{officer_id}")
async def update_officer(
    officer_id: str, request: UpdateOfficerRequest, current_user: CurrentUser = Depends(require_admin)
):
    try:
        officer = await officer_service.update_officer(officer_id, request, current_user.id)
        return success_response("Officer updated successfully", officer)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to update officer %s: %s", officer_id, e, exc_info=True)
        raise


@router.delete("/{officer_id}")
async def delete_officer(officer_id: str, current_user: CurrentUser = Depends(require_admin)):
    try:
        await officer_service.delete_officer(officer_id, current_user.id)
        return success_response("Officer deleted successfully")
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to delete officer %s: %s", officer_id, e, exc_info=True)
        raise
