from typing import List
from fastapi import APIRouter, Depends, Query

from journeyapi.core.auth_middleware import get_current_active_user
from journeyapi.deps import get_user_service
from journeyapi.schemas.user import (
    AgeVerificationRequest,
    RecentVendor,
    User as UserSchema,
    UserPreferences,
    UserPreferencesUpdate,
    UserProfile,
    UsernameUpdate,
)
from journeyapi.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserProfile)
def get_my_profile(
    current_user: UserSchema = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> UserProfile:
    return user_service.get_profile(current_user.id)


@router.put("/me/username", response_model=UserProfile)
def update_my_username(
    update: UsernameUpdate,
    current_user: UserSchema = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> UserProfile:
    """409 when the username is taken."""
    return user_service.set_username(current_user.id, update.username)


@router.post("/me/verify-age", response_model=UserProfile)
def verify_my_age(
    request: AgeVerificationRequest,
    current_user: UserSchema = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> UserProfile:
    return user_service.verify_age(current_user.id, request.birthdate)


@router.post("/me/accept-tos", response_model=UserProfile)
def accept_terms(
    current_user: UserSchema = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> UserProfile:
    return user_service.accept_tos(current_user.id)


@router.get("/me/preferences", response_model=UserPreferences)
def get_my_preferences(
    current_user: UserSchema = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> UserPreferences:
    return user_service.get_preferences(current_user.id)


@router.put("/me/preferences", response_model=UserPreferences)
def update_my_preferences(
    update: UserPreferencesUpdate,
    current_user: UserSchema = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> UserPreferences:
    return user_service.update_preferences(current_user.id, update)


@router.get("/me/recent-vendors", response_model=List[RecentVendor])
def get_my_recent_vendors(
    limit: int = Query(5, ge=1, le=50),
    current_user: UserSchema = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> List[RecentVendor]:
    return user_service.get_recent_vendors(current_user.id, limit=limit)
