from fastapi import APIRouter, Depends

from journeyapi.deps import get_auth_service
from journeyapi.schemas.auth import DeviceRegisterRequest, DeviceRegisterResponse
from journeyapi.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/device", response_model=DeviceRegisterResponse)
def register_device(
    request: DeviceRegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> DeviceRegisterResponse:
    """Anonymous sign-in: one account per device id, returns a bearer token."""
    return auth_service.register_device(request.device_id)
