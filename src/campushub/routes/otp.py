"""
# OTP Routes

One-time codes for password reset. `send`, `resend` and `verify` are public; purging expired
records is an admin operation.
"""

from fastapi import APIRouter, Depends

from campushub.managers.logging_manager import get_logger
from campushub.models.otp_models import SendOTPRequest, VerifyOTPRequest
from campushub.models.user_models import CurrentUser, UserRole
from campushub.routes.auth.dependencies import authorize
from campushub.services.otp_service import otp_service
from campushub.utils.exceptions import AppError
from campushub.utils.responses import success_response

logger = get_logger(prefix="[OTP Routes]")

router = APIRouter(prefix="/otp", tags=["OTP"])


@router.post("/send")
async def send_otp(request: SendOTPRequest):
    try:
        result = await otp_service.send_otp(request.email)
        return success_response("OTP sent successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to send OTP: %s", e, exc_info=True)
        raise


@router.post("/resend")
async def resend_otp(request: SendOTPRequest):
    try:
        result = await otp_service.resend_otp(request.email)
        return success_response("OTP resent successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to resend OTP: %s", e, exc_info=True)
        raise


@router.post("/verify")
async def verify_otp(request: VerifyOTPRequest):
    try:
        result = await otp_service.verify_otp(request.email, request.otp)
        return success_response("OTP verified successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to verify OTP: %s", e, exc_info=True)
        raise


@router.delete("/cleanup")
async def cleanup_expired_otps(current_user: CurrentUser = Depends(authorize(UserRole.ADMIN.value))):
    try:
        result = await otp_service.cleanup_expired(current_user.id)
        return success_response(result["message"], meta=result["meta"])
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to clean up expired OTPs: %s", e, exc_info=True)
        raise
