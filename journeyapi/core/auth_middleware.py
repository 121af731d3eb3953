from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from journeyapi.config import settings
from journeyapi.database.session import get_db
from journeyapi.services.auth_service import AuthService
from journeyapi.schemas.user import User as UserSchema
from journeyapi.core.exceptions import AuthenticationError

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> UserSchema:
    """Bearer token required"""
    if not credentials:
        raise AuthenticationError("Authentication required")

    user = AuthService(db, settings=settings).get_current_user(credentials.credentials)
    if user is None:
        raise AuthenticationError("Invalid or expired token")
    return user


def get_current_active_user(
    current_user: UserSchema = Depends(get_current_user),
) -> UserSchema:
    if not current_user.is_active:
        raise AuthenticationError("Inactive user account")
    return current_user
