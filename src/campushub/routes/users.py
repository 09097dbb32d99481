"""
# User Management Routes

Administrator-only CRUD over user accounts. The last remaining admin can be neither deleted
nor demoted.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from campushub.managers.logging_manager import get_logger
from campushub.models.user_models import CreateUserRequest, CurrentUser, UpdateUserRequest, UserRole
from campushub.routes.auth.dependencies import authorize
from campushub.services.user_service import user_service
from campushub.utils.exceptions import AppError
from campushub.utils.responses import success_response

logger = get_logger(prefix="[User Routes]")

router = APIRouter(prefix="/users", tags=["Users"])

require_admin = authorize(UserRole.ADMIN.value)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(request: CreateUserRequest, current_user: CurrentUser = Depends(require_admin)):
    try:
        user = await user_service.create_user(request, current_user.id)
        return success_response("User created successfully", user)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to create user: %s", e, exc_info=True)
        raise


@router.get("")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    email: Optional[str] = None,
    username: Optional[str] = None,
    role: Optional[UserRole] = None,
    phone_number: Optional[str] = None,
    current_user: CurrentUser = Depends(require_admin),
):
    try:
        result = await user_service.list_users(
            current_user.id,
            page=page,
            limit=limit,
            email=email,
            username=username,
            role=role.value if role else None,
            phone_number=phone_number,
        )
        return success_response("Users retrieved successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to list users: %s", e, exc_info=True)
        raise


@router.get("/{user_id}")
async def get_user(user_id: str, current_user: CurrentUser = Depends(require_admin)):
    try:
        user = await user_service.get_user(user_id, current_user.id)
        return success_response("User retrieved successfully", user)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to get user %s: %s", user_id, e, exc_info=True)
        raise


@router.patch("/{user_id}")
async def update_user(user_id: str, request: UpdateUserRequest, current_user: CurrentUser = Depends(require_admin)):
    try:
        user = await user_service.update_user(user_id, request, current_user.id)
        return success_response("User updated successfully", user)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to update user %s: %s", user_id, e, exc_info=True)
        raise


@router.delete("/{user_id}")
async def delete_user(user_id: str, current_user: CurrentUser = Depends(require_admin)):
    try:
        await user_service.delete_user(user_id, current_user.id)
        return success_response("User deleted successfully")
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to delete user %s: %s", user_id, e, exc_info=True)
        raise
