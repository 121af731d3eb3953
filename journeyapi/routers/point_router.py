"""
Points API router

- GET /points/balance: current points total
- GET /points/ledger: ledger entries, newest first
- GET /points/integrity/my: ledger sum vs profile total
"""

from fastapi import APIRouter, Depends, Query

from journeyapi.core.auth_middleware import get_current_active_user
from journeyapi.deps import get_point_service
from journeyapi.schemas.points import (
    PointsBalanceResponse,
    PointsIntegrityCheckResponse,
    PointsLedgerResponse,
)
from journeyapi.schemas.user import User as UserSchema
from journeyapi.services.point_service import PointService

router = APIRouter(prefix="/points", tags=["points"])


@router.get("/balance", response_model=PointsBalanceResponse)
def get_my_balance(
    current_user: UserSchema = Depends(get_current_active_user),
    point_service: PointService = Depends(get_point_service),
) -> PointsBalanceResponse:
    return point_service.get_user_balance(current_user.id)


@router.get("/ledger", response_model=PointsLedgerResponse)
def get_my_ledger(
    limit: int = Query(50, ge=1, le=100, description="Page size"),
    offset: int = Query(0, ge=0),
    current_user: UserSchema = Depends(get_current_active_user),
    point_service: PointService = Depends(get_point_service),
) -> PointsLedgerResponse:
    return point_service.get_user_ledger(current_user.id, limit=limit, offset=offset)


@router.get("/integrity/my", response_model=PointsIntegrityCheckResponse)
def verify_my_integrity(
    current_user: UserSchema = Depends(get_current_active_user),
    point_service: PointService = Depends(get_point_service),
) -> PointsIntegrityCheckResponse:
    return point_service.verify_user_integrity(current_user.id)
