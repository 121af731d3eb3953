"""
Favorites Repository

Data access for the user_favorites junction table.
"""

from typing import List, Optional
from sqlalchemy import desc
from sqlalchemy.orm import Session

from journeyapi.models.user_favorites import UserFavorite
from journeyapi.repositories.base import BaseRepository
from pydantic import BaseModel
from datetime import datetime


class UserFavoriteSchema(BaseModel):
    user_id: int
    vendor_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FavoritesRepository(BaseRepository[UserFavorite, UserFavoriteSchema]):
    def __init__(self, db: Session):
        super().__init__(UserFavorite, UserFavoriteSchema, db)

    def _query(self, user_id: int, vendor_id: str):
        return self.db.query(self.model_class).filter(
            self.model_class.user_id == user_id,
            self.model_class.vendor_id == vendor_id,
        )

    def get_user_favorites(
        self, user_id: int, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[UserFavoriteSchema]:
        query = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .order_by(desc(self.model_class.created_at), self.model_class.vendor_id)
        )
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)
        return [self._to_schema(instance) for instance in query.all()]

    def get_favorite_vendor_ids(self, user_id: int) -> List[str]:
        rows = (
            self.db.query(self.model_class.vendor_id)
            .filter(self.model_class.user_id == user_id)
            .order_by(self.model_class.vendor_id)
            .all()
        )
        return [row.vendor_id for row in rows]

    def get_favorites_count(self, user_id: int) -> int:
        return self.count({"user_id": user_id})

    def is_favorited(self, user_id: int, vendor_id: str) -> bool:
        return self._query(user_id, vendor_id).first() is not None

    def add_favorite(self, user_id: int, vendor_id: str) -> UserFavoriteSchema:
        return self.create(user_id=user_id, vendor_id=vendor_id)

    def remove_favorite(self, user_id: int, vendor_id: str) -> bool:
        deleted = self._query(user_id, vendor_id).delete(synchronize_session=False)
        self.db.commit()
        return deleted > 0
