from typing import Optional
from sqlalchemy.orm import Session
from datetime import date, datetime, timezone

from journeyapi.models.user import User as UserModel
from journeyapi.schemas.user import User as UserSchema
from journeyapi.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserModel, UserSchema]):
    def __init__(self, db: Session):
        super().__init__(UserModel, UserSchema, db)

    def get_by_device_id(self, device_id: str) -> Optional[UserSchema]:
        return self.get_by_field("device_id", device_id)

    def get_by_username(self, username: str) -> Optional[UserSchema]:
        return self.get_by_field("username", username)

    def create_device_user(self, device_id: str) -> Optional[UserSchema]:
        return self.create(device_id=device_id, points=0, is_active=True)

    def lock_for_update(self, user_id: int) -> Optional[UserModel]:
        """User row locked until the caller's transaction ends (no-op on SQLite)"""
        return (
            self.db.query(self.model_class)
            .filter(self.model_class.id == user_id)
            .with_for_update()
            .first()
        )

    def set_username(self, user_id: int, username: str) -> Optional[UserSchema]:
        return self.update(user_id, username=username)

    def set_age_verified(
        self, user_id: int, birthdate: Optional[date] = None
    ) -> Optional[UserSchema]:
        fields = {"age_verified_at": datetime.now(timezone.utc)}
        if birthdate is not None:
            fields["birthdate"] = birthdate
        return self.update(user_id, **fields)

    def set_tos_accepted(self, user_id: int) -> Optional[UserSchema]:
        return self.update(user_id, tos_accepted_at=datetime.now(timezone.utc))
