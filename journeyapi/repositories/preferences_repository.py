from sqlalchemy.orm import Session

from journeyapi.models.user_preferences import UserPreferences as PreferencesModel
from journeyapi.schemas.user import UserPreferences
from journeyapi.repositories.base import BaseRepository


class PreferencesRepository(BaseRepository[PreferencesModel, UserPreferences]):
    def __init__(self, db: Session):
        super().__init__(PreferencesModel, UserPreferences, db)

    def _pk_column(self):
        return self.model_class.user_id

    def get_or_create(self, user_id: int, default_max_distance: float) -> UserPreferences:
        existing = self.get_by_id(user_id)
        if existing is not None:
            return existing
        return self.create(
            user_id=user_id,
            theme="light",
            notifications=True,
            max_distance=default_max_distance,
            show_partner_only=False,
        )
