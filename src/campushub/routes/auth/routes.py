"""
# Authentication Routes

| Method | Path | Access |
|--------|------|--------|
| POST | `/auth/sign-up` | public |
| POST | `/auth/sign-in` | public |
| POST | `/auth/reset-password` | public (OTP-authorized) |
| GET | `/auth/profile` | authenticated |
| POST | `/auth/logout` | authenticated |

In production the sign-in token is also set as an httpOnly `token` cookie; in development it
is only returned in the response body.
"""

from fastapi import APIRouter, Depends, Response, status

from campushub.config import settings
from campushub.managers.logging_manager import get_logger
from campushub.models.auth_models import ResetPasswordRequest, SignInRequest, SignUpRequest
from campushub.models.user_models import CurrentUser
from campushub.routes.auth.dependencies import authenticate
from campushub.services.auth_service import auth_service
from campushub.utils.exceptions import AppError
from campushub.utils.responses import success_response

logger = get_logger(prefix="[Auth Routes]")

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/sign-up", status_code=status.HTTP_201_CREATED)
async def sign_up(request: SignUpRequest):
    try:
        result = await auth_service.sign_up(request)
        return success_response("User registered successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to sign up user %s: %s", request.username, e, exc_info=True)
        raise


@router.post("/sign-in")
async def sign_in(request: SignInRequest, response: Response):
    try:
        result = await auth_service.sign_in(request)
        if settings.is_production:
            response.set_cookie(
                settings.AUTH_COOKIE_NAME,
                result.token,
                httponly=True,
                secure=True,
                samesite="strict",
                max_age=settings.JWT_EXPIRES_MINUTES * 60,
            )
        return success_response("Signed in successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to sign in: %s", e, exc_info=True)
        raise


@router.post("/reset-password")
async def reset_password(request: ResetPasswordRequest):
    try:
        await auth_service.reset_password(request)
        return success_response("Password has been reset successfully")
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to reset password: %s", e, exc_info=True)
        raise


@router.get("/profile")
async def get_profile(current_user: CurrentUser = Depends(authenticate)):
    try:
        profile = await auth_service.get_profile(current_user)
        return success_response("Profile retrieved successfully", profile)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to get profile: %s", e, exc_info=True)
        raise


@router.post("/logout")
async def logout(response: Response, current_user: CurrentUser = Depends(authenticate)):
    try:
        await auth_service.logout(current_user)
        response.delete_cookie(settings.AUTH_COOKIE_NAME)
        return success_response("Logged out successfully")
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to log out: %s", e, exc_info=True)
        raise
