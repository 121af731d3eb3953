from fastapi import APIRouter, Depends, Query

from journeyapi.core.auth_middleware import get_current_active_user
from journeyapi.deps import get_checkin_service, get_vendor_service
from journeyapi.schemas.checkin import CheckInProof, VendorCheckInResponse
from journeyapi.schemas.user import User as UserSchema
from journeyapi.schemas.vendor import Vendor, VendorListResponse
from journeyapi.services.checkin_service import CheckinService
from journeyapi.services.vendor_service import VendorService

router = APIRouter(prefix="/vendors", tags=["vendors"])


@router.get("", response_model=VendorListResponse)
def list_vendors(
    partner_only: bool = Query(False),
    current_user: UserSchema = Depends(get_current_active_user),
    vendor_service: VendorService = Depends(get_vendor_service),
) -> VendorListResponse:
    """Partners first, then by name."""
    return vendor_service.list_vendors(partner_only=partner_only)


@router.get("/{vendor_id}", response_model=Vendor)
def get_vendor(
    vendor_id: str,
    current_user: UserSchema = Depends(get_current_active_user),
    vendor_service: VendorService = Depends(get_vendor_service),
) -> Vendor:
    return vendor_service.get_vendor(vendor_id)


@router.post("/{vendor_id}/check-in", response_model=VendorCheckInResponse)
def check_in_at_vendor(
    vendor_id: str,
    proof: CheckInProof,
    current_user: UserSchema = Depends(get_current_active_user),
    checkin_service: CheckinService = Depends(get_checkin_service),
) -> VendorCheckInResponse:
    """
    Check in outside of a journey.

    HTTP Status:
        400: QR payload does not match (rescan)
        409: location too far; resend with force=true after confirming
        503: check-in stored but points not yet credited
    """
    return checkin_service.check_in_vendor(current_user.id, vendor_id, proof)
