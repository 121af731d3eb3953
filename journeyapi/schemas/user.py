from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional


class User(BaseModel):
    id: int
    device_id: str
    username: Optional[str] = None
    points: int = 0
    birthdate: Optional[date] = None
    age_verified_at: Optional[datetime] = None
    tos_accepted_at: Optional[datetime] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def is_age_verified(self) -> bool:
        return self.age_verified_at is not None


class UserProfile(BaseModel):
    user_id: int
    username: Optional[str] = None
    points: int
    favorites: List[str] = Field(default_factory=list)
    is_age_verified: bool
    tos_accepted: bool
    created_at: Optional[datetime] = None


class UsernameUpdate(BaseModel):
    username: str = Field(..., min_length=3, max_length=30)

    @field_validator("username")
    @classmethod
    def username_must_be_plain(cls, v: str) -> str:
        v = v.strip()
        if not v.replace("_", "").replace("-", "").isalnum():
            raise ValueError("Username may contain letters, digits, '-' and '_' only")
        return v


class AgeVerificationRequest(BaseModel):
    birthdate: Optional[date] = None


class UserPreferences(BaseModel):
    theme: Literal["light", "dark"] = "light"
    notifications: bool = True
    max_distance: float = 25.0
    show_partner_only: bool = False

    class Config:
        from_attributes = True


class UserPreferencesUpdate(BaseModel):
    theme: Optional[Literal["light", "dark"]] = None
    notifications: Optional[bool] = None
    max_distance: Optional[float] = Field(None, gt=0, le=500)
    show_partner_only: Optional[bool] = None


class RecentVendor(BaseModel):
    vendor_id: str
    vendor_name: str
    visit_count: int
    last_visit_at: Optional[datetime] = None

    class Config:
        from_attributes = True
