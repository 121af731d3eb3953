from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from journeyapi.models.journey import DealType
from journeyapi.schemas.checkin import CheckInEvent
from journeyapi.schemas.route import Coordinates


class JourneyStop(BaseModel):
    vendor_id: str
    name: str
    latitude: float
    longitude: float
    distance: float = 0.0
    has_qr_code: bool = False
    checked_in: bool = False
    check_in_timestamp: Optional[datetime] = None
    check_in_type: Optional[str] = None


class Journey(BaseModel):
    id: int
    user_id: int
    deal_type: DealType
    stops: List[JourneyStop] = Field(default_factory=list)
    current_vendor_index: int = 0
    total_vendors: int = 0
    max_distance: Optional[float] = None
    start_latitude: Optional[float] = None
    start_longitude: Optional[float] = None
    total_distance: float = 0.0
    estimated_time: float = 0.0
    is_active: bool = True
    is_completed: bool = False
    is_cancelled: bool = False
    completion_bonus: int = 0
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def checked_in_count(self) -> int:
        return sum(1 for stop in self.stops if stop.checked_in)


class JourneyCreateRequest(BaseModel):
    deal_type: DealType
    vendor_ids: List[str] = Field(..., min_length=1, max_length=25)
    start_location: Coordinates
    max_distance: Optional[float] = Field(None, gt=0, le=500)
    replace_active: bool = False


class JourneySkipRequest(BaseModel):
    index: Optional[int] = Field(None, ge=0)


class JourneyCheckInResult(BaseModel):
    journey: Journey
    already_checked_in: bool = False
    check_in: Optional[CheckInEvent] = None
    points_earned: int = 0
    completion_bonus: int = 0
    journey_completed: bool = False
    points_balance: Optional[int] = None


class JourneyEndResult(BaseModel):
    journey: Journey
    vendors_visited: int
    bonus_points: int = 0


class JourneyStatsResponse(BaseModel):
    completed_journeys: int = 0
    cancelled_journeys: int = 0
    total_vendors_visited: int = 0
    last_completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True
