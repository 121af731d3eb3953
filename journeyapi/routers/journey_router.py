"""
Journey API router

- POST /journeys: start a journey (409 if one is active, unless replace_active)
- GET /journeys/active: the active journey, or null
- GET /journeys/recent: latest journeys, newest first
- GET /journeys/stats: completed / cancelled counters
- GET /journeys/{id}: one of the caller's journeys
- POST /journeys/{id}/advance: move to the next stop
- POST /journeys/{id}/skip: drop a stop (default: current)
- POST /journeys/{id}/check-in: check in at a stop (default: current)
- POST /journeys/{id}/complete: end early as completed
- POST /journeys/{id}/cancel: cancel

Completed and cancelled journeys answer mutations with 409.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from journeyapi.core.auth_middleware import get_current_active_user
from journeyapi.deps import get_journey_service
from journeyapi.schemas.checkin import JourneyCheckInRequest
from journeyapi.schemas.journey import (
    Journey,
    JourneyCheckInResult,
    JourneyCreateRequest,
    JourneyEndResult,
    JourneySkipRequest,
    JourneyStatsResponse,
)
from journeyapi.schemas.user import User as UserSchema
from journeyapi.services.journey_service import JourneyService

router = APIRouter(prefix="/journeys", tags=["journeys"])


@router.post("", response_model=Journey, status_code=201)
def start_journey(
    request: JourneyCreateRequest,
    current_user: UserSchema = Depends(get_current_active_user),
    journey_service: JourneyService = Depends(get_journey_service),
) -> Journey:
    return journey_service.start(current_user.id, request)


@router.get("/active", response_model=Optional[Journey])
def get_active_journey(
    current_user: UserSchema = Depends(get_current_active_user),
    journey_service: JourneyService = Depends(get_journey_service),
) -> Optional[Journey]:
    return journey_service.get_active(current_user.id)


@router.get("/recent", response_model=List[Journey])
def get_recent_journeys(
    limit: int = Query(5, ge=1, le=50),
    current_user: UserSchema = Depends(get_current_active_user),
    journey_service: JourneyService = Depends(get_journey_service),
) -> List[Journey]:
    return journey_service.recent(current_user.id, limit=limit)


@router.get("/stats", response_model=JourneyStatsResponse)
def get_journey_stats(
    current_user: UserSchema = Depends(get_current_active_user),
    journey_service: JourneyService = Depends(get_journey_service),
) -> JourneyStatsResponse:
    return journey_service.stats(current_user.id)


@router.get("/{journey_id}", response_model=Journey)
def get_journey(
    journey_id: int,
    current_user: UserSchema = Depends(get_current_active_user),
    journey_service: JourneyService = Depends(get_journey_service),
) -> Journey:
    return journey_service.get(current_user.id, journey_id)


@router.post("/{journey_id}/advance", response_model=Journey)
def advance_journey(
    journey_id: int,
    current_user: UserSchema = Depends(get_current_active_user),
    journey_service: JourneyService = Depends(get_journey_service),
) -> Journey:
    return journey_service.advance(current_user.id, journey_id)


@router.post("/{journey_id}/skip", response_model=Journey)
def skip_stop(
    journey_id: int,
    request: Optional[JourneySkipRequest] = None,
    current_user: UserSchema = Depends(get_current_active_user),
    journey_service: JourneyService = Depends(get_journey_service),
) -> Journey:
    index = request.index if request else None
    return journey_service.skip(current_user.id, journey_id, index)


@router.post("/{journey_id}/check-in", response_model=JourneyCheckInResult)
def check_in_at_stop(
    journey_id: int,
    request: JourneyCheckInRequest,
    current_user: UserSchema = Depends(get_current_active_user),
    journey_service: JourneyService = Depends(get_journey_service),
) -> JourneyCheckInResult:
    """
    HTTP Status:
        400: QR payload does not match (rescan)
        409: too far (resend with force=true), or journey already ended
        503: stop checked in but points not yet credited; retrying is safe
    """
    return journey_service.check_in(current_user.id, journey_id, request)


@router.post("/{journey_id}/complete", response_model=JourneyEndResult)
def complete_journey(
    journey_id: int,
    current_user: UserSchema = Depends(get_current_active_user),
    journey_service: JourneyService = Depends(get_journey_service),
) -> JourneyEndResult:
    return journey_service.complete(current_user.id, journey_id)


@router.post("/{journey_id}/cancel", response_model=JourneyEndResult)
def cancel_journey(
    journey_id: int,
    current_user: UserSchema = Depends(get_current_active_user),
    journey_service: JourneyService = Depends(get_journey_service),
) -> JourneyEndResult:
    return journey_service.cancel(current_user.id, journey_id)
