"""
# Organization Routes

Student organizations. Admins and advisers create; admins, officers and advisers list; only
admins update or delete.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from campushub.managers.logging_manager import get_logger
from campushub.models.organization_models import CreateOrganizationRequest, UpdateOrganizationRequest
from campushub.models.user_models import CurrentUser, UserRole
from campushub.routes.auth.dependencies import authorize
from campushub.services.organization_service import organization_service
from campushub.utils.exceptions import AppError
from campushub.utils.responses import success_response

logger = get_logger(prefix="[Organization Routes]")

router = APIRouter(prefix="/orgs", tags=["Organizations"])

require_admin = authorize(UserRole.ADMIN.value)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_organization(
    request: CreateOrganizationRequest,
    current_user: CurrentUser = Depends(authorize(UserRole.ADMIN.value, UserRole.ADVISER.value)),
):
    try:
        organization = await organization_service.create_organization(request, current_user.id)
        return success_response("Organization created successfully", organization)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to create organization: %s", e, exc_info=True)
        raise


@router.get("")
async def list_organizations(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort: Optional[str] = Query(None, description="Comma-separated fields, prefix with - for descending"),
    fields: Optional[str] = Query(None, description="Comma-separated projection"),
    org_name: Optional[str] = None,
    adviser_id: Optional[str] = None,
    current_user: CurrentUser = Depends(
        authorize(UserRole.ADMIN.value, UserRole.OFFICER.value, UserRole.ADVISER.value)
    ),
):
    try:
        result = await organization_service.list_organizations(
            current_user.id,
            page=page,
            limit=limit,
            sort=sort,
            fields=fields,
            org_name=org_name,
            adviser_id=adviser_id,
        )
        return success_response("Organizations retrieved successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to list organizations: %s", e, exc_info=True)
        raise


@router.get("/{org_id}")
async def get_organization(
    org_id: str, current_user: CurrentUser = Depends(authorize(UserRole.ADMIN.value, UserRole.OFFICER.value))
):
    try:
        organization = await organization_service.get_organization(org_id, current_user.id)
        return success_response("Organization retrieved successfully", organization)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to get organization %s: %s", org_id, e, exc_info=True)
        raise


@router.patch("/{org_id}")
async def update_organization(
    org_id: str, request: UpdateOrganizationRequest, current_user: CurrentUser = Depends(require_admin)
):
    try:
        organization = await organization_service.update_organization(org_id, request, current_user.id)
        return success_response("Organization updated successfully", organization)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to update organization %s: %s", org_id, e, exc_info=True)
        raise


@router.delete("/{org_id}")
async def delete_organization(org_id: str, current_user: CurrentUser = Depends(require_admin)):
    try:
        await organization_service.delete_organization(org_id, current_user.id)
        return success_response("Organization deleted successfully")
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to delete organization %s: %s", org_id, e, exc_info=True)
        raise
