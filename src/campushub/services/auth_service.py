"""
# Authentication Service

Sign-up, sign-in and OTP-authorized password reset.

## Flows

### Sign-up
1. Reject duplicate usernames and emails (409).
2. Hash the password with bcrypt.
3. Insert the user, record a "Sign Up" audit entry and issue a token.

### Sign-in
The identifier may be either an email or a username. Unknown identifiers and wrong passwords
produce the same `401 Invalid credentials` so that account existence is not revealed.

### Password reset
1. The user must exist (404).
2. The presented OTP must be a live, unverified code for that email.
3. The new password hash is stored and every OTP for the email is deleted.
"""

from typing import Any, Dict, Optional

from bson import ObjectId
from fastapi import status

from campushub.database import db_manager
from campushub.managers.logging_manager import get_logger
from campushub.models.audit_log_models import ActionType
from campushub.models.auth_models import AuthResponse, ResetPasswordRequest, SignInRequest, SignUpRequest
from campushub.models.common import utc_now
from campushub.models.user_models import CurrentUser, UserDocument, UserResponse
from campushub.services.audit_log_service import audit_log_service
from campushub.services.otp_service import otp_service
from campushub.utils.exceptions import AppError
from campushub.utils.security_utils import create_access_token, get_password_hash, verify_password

logger = get_logger(prefix="[AuthService]")


class AuthService:
    def __init__(self):
        self.collection_name = "users"

    def _users(self):
        return db_manager.get_collection(self.collection_name)

    async def ensure_unique(
        self, username: Optional[str], email: Optional[str], exclude_id: Optional[ObjectId] = None
    ) -> None:
        """
        Reject a username or email that already belongs to another user.

        Raises:
            AppError(409): "Username already exists" or "Email already exists".
        """
        users = self._users()
        exclude = {"_id": {"$ne": exclude_id}} if exclude_id else {}
        if username and await users.find_one({"username": username, **exclude}, {"_id": 1}):
            raise AppError("Username already exists", status.HTTP_409_CONFLICT)
        if email and await users.find_one({"email": email.lower(), **exclude}, {"_id": 1}):
            raise AppError("Email already exists", status.HTTP_409_CONFLICT)

    async def sign_up(self, request: SignUpRequest) -> AuthResponse:
        await self.ensure_unique(request.username, request.email)

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

        await audit_log_service.log_action(str(result.inserted_id), ActionType.SIGN_UP)
        logger.info("User signed up: %s (%s)", user.username, result.inserted_id)
        return AuthResponse(user=UserResponse.from_document(doc), token=create_access_token(doc))

    async def sign_in(self, request: SignInRequest) -> AuthResponse:
        identifier = request.identifier.strip()
        user = await self._users().find_one(
            {"$or": [{"email": identifier.lower()}, {"username": identifier}]}
        )
        if not user or not verify_password(request.password, user.get("password")):
            logger.warning("Failed sign-in for identifier %s", identifier)
            raise AppError("Invalid credentials", status.HTTP_401_UNAUTHORIZED)

        await audit_log_service.log_action(str(user["_id"]), ActionType.SIGN_IN)
        logger.info("User signed in: %s", user["username"])
        return AuthResponse(user=UserResponse.from_document(user), token=create_access_token(user))

    async def reset_password(self, request: ResetPasswordRequest) -> None:
        email = request.email.lower()
        user = await self._users().find_one({"email": email}, {"_id": 1})
        if not user:
            raise AppError("User not found", status.HTTP_404_NOT_FOUND)

        await otp_service.consume_for_password_reset(email, request.otp)

        await self._users().update_one(
            {"_id": user["_id"]},
            {
                "$set": {"password": get_password_hash(request.new_password), "updated_at": utc_now()},
                "$unset": {"password_reset_token": "", "password_reset_expires": ""},
            },
        )
        await otp_service.clear(email)

        await audit_log_service.log_action(str(user["_id"]), ActionType.RESET_PASSWORD)
        logger.info("Password reset for user %s", user["_id"])

    async def get_profile(self, current_user: CurrentUser) -> Dict[str, Any]:
        await audit_log_service.log_action(current_user.id, ActionType.VIEW_PROFILE)
        return current_user.model_dump()

    async def logout(self, current_user: CurrentUser) -> None:
        await audit_log_service.log_action(current_user.id, ActionType.LOGOUT)
        logger.info("User logged out: %s", current_user.username)


# Global instance
auth_service = AuthService()
