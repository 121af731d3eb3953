from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional

from journeyapi.schemas.route import Coordinates


class CheckInProof(BaseModel):
    """Either a scanned QR payload or a device location fix.

    ``force`` is the user's explicit confirmation to check in despite a
    failed proximity check (or without any proof).
    """

    qr_payload: Optional[str] = Field(None, max_length=512)
    location: Optional[Coordinates] = None
    force: bool = False


class JourneyCheckInRequest(CheckInProof):
    index: Optional[int] = Field(
        None, ge=0, description="Stop index; defaults to the current stop"
    )


class CheckInEvent(BaseModel):
    id: int
    user_id: int
    vendor_id: str
    journey_id: Optional[int] = None
    vendor_index: Optional[int] = None
    check_in_type: str
    points_earned: int
    is_journey_check_in: bool = False
    distance_miles: Optional[float] = None
    proximity_overridden: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CheckInDecision(BaseModel):
    """Outcome of proof validation, before anything is written"""

    check_in_type: str
    points: int
    distance_miles: Optional[float] = None
    proximity_overridden: bool = False


class VendorCheckInResponse(BaseModel):
    check_in: CheckInEvent
    points_earned: int
    points_balance: int
    message: str = "Check-in successful!"
