from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class Vendor(BaseModel):
    id: str
    name: str
    address: str = ""
    latitude: float
    longitude: float
    hours: Dict[str, Any] = Field(default_factory=dict)
    contact: Dict[str, Any] = Field(default_factory=dict)
    deals: Dict[str, Any] = Field(default_factory=dict)
    is_partner: bool = False
    has_qr_code: bool = False
    rating: Optional[float] = None
    logo_url: Optional[str] = None

    class Config:
        from_attributes = True


class VendorListResponse(BaseModel):
    vendors: List[Vendor]
    total_count: int
