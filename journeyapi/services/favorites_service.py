"""
Favorites Service

Business logic for a user's favorite vendors.
"""

from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from journeyapi.providers.vendor_catalog import VendorCatalog
from journeyapi.repositories.favorites_repository import FavoritesRepository
from journeyapi.schemas.favorites import (
    FavoriteVendorInfo,
    UserFavoritesResponse,
    FavoriteCheckResponse,
)
from journeyapi.core.exceptions import NotFoundError, ConflictError

logger = logging.getLogger(__name__)


class FavoritesService:
    def __init__(self, db: Session, catalog: VendorCatalog):
        self.db = db
        self.catalog = catalog
        self.favorites_repo = FavoritesRepository(db)

    def get_user_favorites(
        self, user_id: int, limit: Optional[int] = 100, offset: Optional[int] = 0
    ) -> UserFavoritesResponse:
        """
        Favorites newest first, joined with catalog details.

        Vendors that have left the catalog are still listed, by id.
        """
        if limit and limit > 500:
            limit = 500

        favorites = self.favorites_repo.get_user_favorites(
            user_id=user_id, limit=limit, offset=offset
        )
        vendors = self.catalog.get_many([fav.vendor_id for fav in favorites])

        items = []
        for fav in favorites:
            vendor = vendors.get(fav.vendor_id)
            items.append(
                FavoriteVendorInfo(
                    vendor_id=fav.vendor_id,
                    name=vendor.name if vendor else fav.vendor_id,
                    is_partner=vendor.is_partner if vendor else False,
                    added_at=fav.created_at,
                )
            )

        return UserFavoritesResponse(
            user_id=user_id,
            favorites=items,
            total_count=self.favorites_repo.get_favorites_count(user_id),
        )

    def add_favorite(self, user_id: int, vendor_id: str) -> FavoriteVendorInfo:
        """
        Raises:
            NotFoundError: unknown vendor
            ConflictError: already a favorite
        """
        vendor = self.catalog.get(vendor_id)
        if vendor is None:
            raise NotFoundError(
                f"Vendor '{vendor_id}' not found", details={"vendor_id": vendor_id}
            )

        if self.favorites_repo.is_favorited(user_id, vendor_id):
            raise ConflictError(
                f"Vendor '{vendor_id}' is already in your favorites",
                details={"vendor_id": vendor_id},
            )

        try:
            favorite = self.favorites_repo.add_favorite(user_id, vendor_id)
        except IntegrityError:
            raise ConflictError(
                f"Vendor '{vendor_id}' is already in your favorites",
                details={"vendor_id": vendor_id},
            )

        logger.info(f"User {user_id} added favorite: {vendor_id}")
        return FavoriteVendorInfo(
            vendor_id=vendor.id,
            name=vendor.name,
            is_partner=vendor.is_partner,
            added_at=favorite.created_at,
        )

    def remove_favorite(self, user_id: int, vendor_id: str) -> bool:
        if not self.favorites_repo.remove_favorite(user_id, vendor_id):
            raise NotFoundError(
                f"Vendor '{vendor_id}' is not in your favorites",
                details={"vendor_id": vendor_id},
            )

        logger.info(f"User {user_id} removed favorite: {vendor_id}")
        return True

    def check_favorite(self, user_id: int, vendor_id: str) -> FavoriteCheckResponse:
        return FavoriteCheckResponse(
            vendor_id=vendor_id,
            is_favorited=self.favorites_repo.is_favorited(user_id, vendor_id),
        )
