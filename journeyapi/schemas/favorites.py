"""
Favorites Schemas
"""

from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional


class FavoriteVendorInfo(BaseModel):
    vendor_id: str
    name: str
    is_partner: bool = False
    added_at: Optional[datetime] = None


class UserFavoritesResponse(BaseModel):
    user_id: int
    favorites: List[FavoriteVendorInfo] = Field(default_factory=list)
    total_count: int = 0


class FavoriteCheckResponse(BaseModel):
    vendor_id: str
    is_favorited: bool
