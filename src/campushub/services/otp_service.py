"""
# OTP Service

This module manages the **one-time password lifecycle** used to authorize password resets.

## Lifecycle

```
send ──► [unverified, attempts=0] ──verify ok──► deleted (single use)
                 │
                 ├── wrong code ──► attempts += 1 ──(attempts == 5)──► all codes for email deleted
                 └── expired ─────► deleted
```

- **Generation**: a 6-digit code in `[100000, 999999]`, valid for `OTP_EXPIRY_MINUTES`.
- **One active code**: sending a new code deletes every earlier code for the email.
- **Attempt cap**: `OTP_MAX_ATTEMPTS` wrong guesses invalidate every outstanding code for
  the email.
- **Single use**: a successful verification deletes every code for the email.
- **Cleanup**: expired codes can be purged on demand; a TTL index removes stragglers.
"""

import math
import secrets
from datetime import timedelta
from typing import Any, Dict, Optional

from fastapi import status

from campushub.config import settings
from campushub.database import db_manager
from campushub.managers.logging_manager import get_logger
from campushub.models.audit_log_models import ActionType
from campushub.models.common import as_utc, utc_now
from campushub.models.otp_models import OTPDocument, OTPSentResponse, OTPVerifiedResponse
from campushub.services.audit_log_service import audit_log_service
from campushub.services.email_service import email_service
from campushub.utils.exceptions import AppError

logger = get_logger(prefix="[OTPService]")

TOO_MANY_ATTEMPTS_MESSAGE = "Too many invalid attempts. OTP invalidated."


def generate_otp_code() -> str:
    return str(secrets.randbelow(900000) + 100000)


class OTPService:
    def __init__(self):
        self.collection_name = "otps"

    def _collection(self):
        return db_manager.get_collection(self.collection_name)

    async def _latest_unverified(self, email: str) -> Optional[Dict[str, Any]]:
        return await self._collection().find_one(
            {"email": email, "is_verified": False}, sort=[("created_at", -1)]
        )

    async def clear(self, email: str) -> int:
        """Delete every OTP record for an email."""
        result = await self._collection().delete_many({"email": email})
        return result.deleted_count

    async def send_otp(self, email: str) -> OTPSentResponse:
        """
        Issue a fresh code for a registered email and deliver it.

        Raises:
            AppError(404): If no user has this email.
            AppError(500): If the email could not be sent.
        """
        email = email.lower()
        user = await db_manager.get_collection("users").find_one({"email": email}, {"_id": 1})
        if not user:
            raise AppError("User with this email does not exist", status.HTTP_404_NOT_FOUND)

        await self.clear(email)

        record = OTPDocument(
            email=email,
            otp=generate_otp_code(),
            expires_at=utc_now() + timedelta(minutes=settings.OTP_EXPIRY_MINUTES),
        )
        await self._collection().insert_one(record.model_dump())
        await email_service.send_otp_email(email, record.otp)

        logger.info("OTP issued for %s (expires %s)", email, record.expires_at.isoformat())
        return OTPSentResponse(email=email, expires_at=record.expires_at)

    async def resend_otp(self, email: str) -> OTPSentResponse:
        """
        Re-issue a code unless the current one is still valid.

        Raises:
            AppError(429): If the latest unverified code has not expired yet.
        """
        email = email.lower()
        latest = await self._latest_unverified(email)
        if latest:
            remaining = (as_utc(latest["expires_at"]) - utc_now()).total_seconds()
            if remaining > 0:
                minutes = max(1, math.ceil(remaining / 60))
                raise AppError(
                    f"Current OTP is still valid. Please check your email or wait {minutes} minute(s).",
                    status.HTTP_429_TOO_MANY_REQUESTS,
                )
        return await self.send_otp(email)

    async def verify_otp(self, email: str, code: str) -> OTPVerifiedResponse:
        """
        Verify a code. A successful verification consumes every code for the email.

        Raises:
            AppError(400): "Invalid OTP" or "OTP has expired".
            AppError(429): When the attempt cap is reached; all codes are invalidated.
        """
        email = email.lower()
        collection = self._collection()
        record = await collection.find_one({"email": email, "otp": code, "is_verified": False})

        if not record:
            latest = await self._latest_unverified(email)
            if latest:
                attempts = latest.get("verification_attempts", 0) + 1
                await collection.update_one(
                    {"_id": latest["_id"]}, {"$set": {"verification_attempts": attempts}}
                )
                if attempts >= settings.OTP_MAX_ATTEMPTS:
                    await self.clear(email)
                    logger.warning("OTP invalidated for %s after %d failed attempts", email, attempts)
                    raise AppError(TOO_MANY_ATTEMPTS_MESSAGE, status.HTTP_429_TOO_MANY_REQUESTS)
            raise AppError("Invalid OTP", status.HTTP_400_BAD_REQUEST)

        if as_utc(record["expires_at"]) < utc_now():
            await collection.delete_one({"_id": record["_id"]})
            raise AppError("OTP has expired", status.HTTP_400_BAD_REQUEST)

        if record.get("verification_attempts", 0) >= settings.OTP_MAX_ATTEMPTS:
            await self.clear(email)
            raise AppError(TOO_MANY_ATTEMPTS_MESSAGE, status.HTTP_429_TOO_MANY_REQUESTS)

        await collection.update_one(
            {"_id": record["_id"]}, {"$set": {"is_verified": True, "verified_at": utc_now()}}
        )
        await self.clear(email)

        logger.info("OTP verified for %s", email)
        return OTPVerifiedResponse(email=email, verified=True)

    async def consume_for_password_reset(self, email: str, code: str) -> None:
        """
        Check a code presented with a password reset and mark it verified.

        The caller deletes the email's codes once the new password is stored.

        Raises:
            AppError(400): "Invalid OTP" or "OTP has expired".
            AppError(429): "OTP verification limit exceeded".
        """
        email = email.lower()
        collection = self._collection()
        record = await collection.find_one({"email": email, "otp": code, "is_verified": False})
        if not record:
            raise AppError("Invalid OTP", status.HTTP_400_BAD_REQUEST)

        if as_utc(record["expires_at"]) < utc_now():
            await collection.update_one({"_id": record["_id"]}, {"$inc": {"verification_attempts": 1}})
            raise AppError("OTP has expired", status.HTTP_400_BAD_REQUEST)

        if record.get("verification_attempts", 0) >= settings.OTP_MAX_ATTEMPTS:
            raise AppError("OTP verification limit exceeded", status.HTTP_429_TOO_MANY_REQUESTS)

        await collection.update_one(
            {"_id": record["_id"]}, {"$set": {"is_verified": True, "verified_at": utc_now()}}
        )

    async def cleanup_expired(self, user_id: str) -> Dict[str, Any]:
        """Delete every expired code."""
        result = await self._collection().delete_many({"expires_at": {"$lt": utc_now()}})
        await audit_log_service.log_action(user_id, ActionType.CLEANUP_OTP_RECORDS)
        logger.info("Deleted %d expired OTP records", result.deleted_count)
        return {
            "message": "Expired OTPs have been successfully deleted",
            "meta": {"deleted_count": result.deleted_count},
        }


# Global instance
otp_service = OTPService()
