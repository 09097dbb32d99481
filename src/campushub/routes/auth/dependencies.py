"""
# Authentication Dependencies

FastAPI dependencies that resolve the caller from a JWT and enforce role-based access.

## Token Source

The token is read from the `token` cookie first (set on sign-in in production) and then from
an `Authorization: Bearer <token>` header.

## Dependencies

### `authenticate`
Requires a valid token and returns a `CurrentUser` built from its claims.

### `optional_authenticate`
Like `authenticate`, but a missing or invalid token yields a guest (`role="guest"`) instead of
an error. Used by the public listing endpoints.

### `authorize(*roles)`
A dependency factory that first authenticates and then checks the caller's role:

```python
@router.delete("/{org_id}")
async def delete_org(org_id: str, current_user: CurrentUser = Depends(authorize("admin"))):
    ...
```

Passing `"guest"` among the roles switches to optional authentication so guests are admitted.
"""

from typing import Optional

from fastapi import Depends, Request, status
from fastapi.security import OAuth2PasswordBearer

from campushub.config import settings
from campushub.managers.logging_manager import get_logger
from campushub.models.user_models import CurrentUser
from campushub.utils.exceptions import AppError
from campushub.utils.security_utils import decode_access_token

logger = get_logger(prefix="[Auth Dependencies]")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/sign-in", auto_error=False)

GUEST_ROLE = "guest"


def get_request_token(request: Request, bearer_token: Optional[str] = Depends(oauth2_scheme)) -> Optional[str]:
    """Token from the auth cookie, falling back to the bearer header."""
    return request.cookies.get(settings.AUTH_COOKIE_NAME) or bearer_token


def _user_from_token(token: str) -> CurrentUser:
    payload = decode_access_token(token)
    return CurrentUser(
        id=payload.get("user_id"),
        username=payload.get("username"),
        email=payload.get("email"),
        role=payload.get("role") or GUEST_ROLE,
    )


async def authenticate(token: Optional[str] = Depends(get_request_token)) -> CurrentUser:
    """
    Resolve the authenticated caller.

    Raises:
        AppError(401): No token, an expired token or an invalid token.
    """
    if not token:
        raise AppError("Unauthorized: No token provided", status.HTTP_401_UNAUTHORIZED)
    return _user_from_token(token)


async def optional_authenticate(token: Optional[str] = Depends(get_request_token)) -> CurrentUser:
    """Resolve the caller if a valid token is present, otherwise a guest."""
    if not token:
        return CurrentUser()
    try:
        return _user_from_token(token)
    except AppError as e:
        logger.debug("Ignoring unusable token on optional route: %s", e.message)
        return CurrentUser()


def authorize(*roles: str):
    """
    Build a dependency that admits only callers whose role is in `roles`.

    Raises:
        AppError(403): `Forbidden: role "<role>" is not allowed`.
    """
    allowed = set(roles)
    resolver = optional_authenticate if GUEST_ROLE in allowed else authenticate

    async def role_checker(current_user: CurrentUser = Depends(resolver)) -> CurrentUser:
        role = current_user.role or GUEST_ROLE
        if role not in allowed:
            logger.warning("Role %s denied (allowed: %s) for user %s", role, sorted(allowed), current_user.id)
            raise AppError(f'Forbidden: role "{role}" is not allowed', status.HTTP_403_FORBIDDEN)
        return current_user

    return role_checker
