"""
Favorites Router

Endpoints for a user's favorite vendors.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from journeyapi.core.auth_middleware import get_current_active_user
from journeyapi.deps import get_favorites_service
from journeyapi.schemas.favorites import (
    FavoriteCheckResponse,
    FavoriteVendorInfo,
    UserFavoritesResponse,
)
from journeyapi.schemas.user import User as UserSchema
from journeyapi.services.favorites_service import FavoritesService

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("", response_model=UserFavoritesResponse)
def get_my_favorites(
    limit: Optional[int] = Query(100, ge=1, le=500),
    offset: Optional[int] = Query(0, ge=0),
    current_user: UserSchema = Depends(get_current_active_user),
    favorites_service: FavoritesService = Depends(get_favorites_service),
) -> UserFavoritesResponse:
    return favorites_service.get_user_favorites(current_user.id, limit=limit, offset=offset)


@router.post(
    "/{vendor_id}", response_model=FavoriteVendorInfo, status_code=status.HTTP_201_CREATED
)
def add_favorite(
    vendor_id: str,
    current_user: UserSchema = Depends(get_current_active_user),
    favorites_service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteVendorInfo:
    """404 for an unknown vendor, 409 if already a favorite."""
    return favorites_service.add_favorite(current_user.id, vendor_id)


@router.delete("/{vendor_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_favorite(
    vendor_id: str,
    current_user: UserSchema = Depends(get_current_active_user),
    favorites_service: FavoritesService = Depends(get_favorites_service),
) -> None:
    favorites_service.remove_favorite(current_user.id, vendor_id)


@router.get("/check/{vendor_id}", response_model=FavoriteCheckResponse)
def check_favorite(
    vendor_id: str,
    current_user: UserSchema = Depends(get_current_active_user),
    favorites_service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteCheckResponse:
    return favorites_service.check_favorite(current_user.id, vendor_id)
