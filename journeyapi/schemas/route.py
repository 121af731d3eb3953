from pydantic import BaseModel, Field
from typing import List, Optional

from journeyapi.models.journey import DealType


class Coordinates(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class RouteStop(BaseModel):
    vendor_id: str
    name: str
    latitude: float
    longitude: float
    distance: float = Field(..., description="Miles from the route start")
    is_partner: bool = False
    has_qr_code: bool = False


class Route(BaseModel):
    stops: List[RouteStop] = Field(default_factory=list)
    total_distance: float = Field(0.0, description="Chained distance in miles")
    estimated_time: float = Field(0.0, description="Minutes")

    @property
    def vendor_ids(self) -> List[str]:
        return [stop.vendor_id for stop in self.stops]


class RouteEstimateRequest(BaseModel):
    vendor_ids: List[str] = Field(default_factory=list, max_length=25)
    start_location: Coordinates


class RoutePlanRequest(BaseModel):
    deal_type: DealType
    start_location: Coordinates
    max_distance: Optional[float] = Field(None, gt=0, le=500)
    max_vendors: Optional[int] = Field(None, ge=1, le=25)
    skip_vendor_ids: List[str] = Field(default_factory=list)
    partner_only: bool = False
