from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from datetime import date

from journeyapi.config import Settings
from journeyapi.core.exceptions import ConflictError, NotFoundError, ValidationError
from journeyapi.repositories.checkin_repository import UserVisitRepository
from journeyapi.repositories.favorites_repository import FavoritesRepository
from journeyapi.repositories.preferences_repository import PreferencesRepository
from journeyapi.repositories.user_repository import UserRepository
from journeyapi.schemas.user import (
    RecentVendor,
    User as UserSchema,
    UserPreferences,
    UserPreferencesUpdate,
    UserProfile,
)
import logging

logger = logging.getLogger(__name__)

MINIMUM_AGE = 21


def age_on(birthdate: date, today: date) -> int:
    years = today.year - birthdate.year
    if (today.month, today.day) < (birthdate.month, birthdate.day):
        years -= 1
    return years


class UserService:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.user_repo = UserRepository(db)
        self.favorites_repo = FavoritesRepository(db)
        self.preferences_repo = PreferencesRepository(db)
        self.visit_repo = UserVisitRepository(db)

    def _get_user(self, user_id: int) -> UserSchema:
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found", details={"user_id": user_id})
        return user

    def get_profile(self, user_id: int) -> UserProfile:
        user = self._get_user(user_id)
        return UserProfile(
            user_id=user.id,
            username=user.username,
            points=user.points,
            favorites=self.favorites_repo.get_favorite_vendor_ids(user_id),
            is_age_verified=user.is_age_verified,
            tos_accepted=user.tos_accepted_at is not None,
            created_at=user.created_at,
        )

    def set_username(self, user_id: int, username: str) -> UserProfile:
        existing = self.user_repo.get_by_username(username)
        if existing is not None and existing.id != user_id:
            raise ConflictError(
                f"Username '{username}' is already taken", details={"username": username}
            )
        try:
            self.user_repo.set_username(user_id, username)
        except IntegrityError:
            raise ConflictError(
                f"Username '{username}' is already taken", details={"username": username}
            )
        logger.info(f"User {user_id} set username {username}")
        return self.get_profile(user_id)

    def verify_age(self, user_id: int, birthdate: Optional[date] = None) -> UserProfile:
        """Record the 21+ confirmation; a birthdate, when given, must be 21+"""
        self._get_user(user_id)
        if birthdate is not None and age_on(birthdate, date.today()) < MINIMUM_AGE:
            raise ValidationError(
                f"You must be {MINIMUM_AGE} or older",
                details={"minimum_age": MINIMUM_AGE},
            )
        self.user_repo.set_age_verified(user_id, birthdate)
        return self.get_profile(user_id)

    def accept_tos(self, user_id: int) -> UserProfile:
        self._get_user(user_id)
        self.user_repo.set_tos_accepted(user_id)
        return self.get_profile(user_id)

    def get_preferences(self, user_id: int) -> UserPreferences:
        return self.preferences_repo.get_or_create(
            user_id, default_max_distance=self.settings.DEFAULT_MAX_DISTANCE
        )

    def update_preferences(
        self, user_id: int, update: UserPreferencesUpdate
    ) -> UserPreferences:
        self.get_preferences(user_id)
        changes = update.model_dump(exclude_none=True)
        if not changes:
            return self.get_preferences(user_id)
        return self.preferences_repo.update(user_id, **changes)

    def get_recent_vendors(self, user_id: int, limit: int = 5) -> List[RecentVendor]:
        return self.visit_repo.get_recent(user_id, limit=limit)
