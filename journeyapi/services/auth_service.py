from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from journeyapi.config import Settings
from journeyapi.core.security import create_access_token, decode_access_token
from journeyapi.repositories.user_repository import UserRepository
from journeyapi.schemas.auth import DeviceRegisterResponse, TokenData
from journeyapi.schemas.user import User as UserSchema
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """Anonymous device registration and bearer token checks"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.user_repo = UserRepository(db)

    def register_device(self, device_id: str) -> DeviceRegisterResponse:
        """Create-or-get the user bound to ``device_id`` and issue a token"""
        user = self.user_repo.get_by_device_id(device_id)
        is_new = False
        if user is None:
            try:
                user = self.user_repo.create_device_user(device_id)
                is_new = True
                logger.info(f"Registered new device user {user.id}")
            except IntegrityError:
                # concurrent registration of the same device
                self.db.rollback()
                user = self.user_repo.get_by_device_id(device_id)

        access_token = create_access_token(
            data={"sub": user.device_id, "user_id": user.id}
        )
        return DeviceRegisterResponse(
            user_id=user.id, access_token=access_token, is_new_user=is_new
        )

    def verify_token(self, token: str) -> Optional[TokenData]:
        payload = decode_access_token(token)
        if not payload:
            return None

        device_id = payload.get("sub")
        user_id = payload.get("user_id")
        if not isinstance(device_id, str) or not isinstance(user_id, int):
            return None
        return TokenData(user_id=user_id, device_id=device_id)

    def get_current_user(self, token: str) -> Optional[UserSchema]:
        token_data = self.verify_token(token)
        if token_data is None:
            return None

        user = self.user_repo.get_by_id(token_data.user_id)
        if not user or not user.is_active or user.device_id != token_data.device_id:
            return None
        return user
