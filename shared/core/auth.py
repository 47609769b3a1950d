import secrets
from datetime import datetime, timedelta
from typing import Optional
from fastapi import Depends, Query, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from pydantic import ValidationError

from shared.core.config import settings
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response

security = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_minutes: Optional[int] = None):
    payload = data.copy()
    payload["user_id"] = str(payload["user_id"])
    expires = datetime.utcnow() + timedelta(
        minutes=expires_minutes or settings.JWT_EXPIRE_MINUTES)
    payload["exp"] = expires
    return jwt.encode(payload, settings.JWT_SECRET,
                      algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> UserToken:
    """Verify and decode a JWT token into the request principal."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
        return UserToken(**payload)
    except (JWTError, ValidationError):
        return error_response(
            message="Invalid or expired token",
            http_status=status.HTTP_401_UNAUTHORIZED
        )


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[UserToken]:
    if credentials is None:
        return None
    return verify_token(credentials.credentials)


def validate_current_token(
    current_user: Optional[UserToken] = Depends(get_optional_user)
) -> UserToken:
    if current_user is None:
        return error_response(
            message="Unauthorized",
            http_status=status.HTTP_401_UNAUTHORIZED
        )
    return current_user


def allow_admin(current_user: UserToken = Depends(validate_current_token)):
    if not current_user.is_admin:
        return error_response(
            message="Admin access required",
            http_status=status.HTTP_403_FORBIDDEN
        )
    return current_user


def allow_owner_or_admin(current_user: UserToken = Depends(validate_current_token)):
    if not (current_user.is_admin or current_user.is_owner):
        return error_response(
            message="Access denied",
            http_status=status.HTTP_403_FORBIDDEN
        )
    return current_user


def is_valid_cron_secret(value: Optional[str]) -> bool:
    if not settings.CRON_SECRET or not value:
        return False
    return secrets.compare_digest(value, settings.CRON_SECRET)


def allow_admin_or_cron_secret(
    secret: Optional[str] = Query(None),
    current_user: Optional[UserToken] = Depends(get_optional_user)
) -> Optional[UserToken]:
    """Admin session, or the shared cron secret passed as ?secret=."""
    if current_user is None and not is_valid_cron_secret(secret):
        return error_response(
            message="Unauthorized",
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    if current_user is not None and not current_user.is_admin:
        return error_response(
            message="Admin access required",
            http_status=status.HTTP_403_FORBIDDEN
        )

    return current_user


def validate_cron_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
):
    """Scheduled jobs authenticate with `Authorization: Bearer <CRON_SECRET>`."""
    if credentials is None or not is_valid_cron_secret(credentials.credentials):
        return error_response(
            message="Unauthorized",
            http_status=status.HTTP_401_UNAUTHORIZED
        )
    return True
