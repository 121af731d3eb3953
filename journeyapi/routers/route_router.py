from fastapi import APIRouter, Depends

from journeyapi.core.auth_middleware import get_current_active_user
from journeyapi.deps import get_route_service
from journeyapi.schemas.route import Route, RouteEstimateRequest, RoutePlanRequest
from journeyapi.schemas.user import User as UserSchema
from journeyapi.services.route_service import RouteService

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/estimate", response_model=Route)
def estimate_route(
    request: RouteEstimateRequest,
    current_user: UserSchema = Depends(get_current_active_user),
    route_service: RouteService = Depends(get_route_service),
) -> Route:
    """Order the given vendors nearest-first and estimate distance and time."""
    return route_service.build_route(request.vendor_ids, request.start_location)


@router.post("/plan", response_model=Route)
def plan_route(
    request: RoutePlanRequest,
    current_user: UserSchema = Depends(get_current_active_user),
    route_service: RouteService = Depends(get_route_service),
) -> Route:
    """Pick nearby vendors offering the deal type, then estimate the route."""
    return route_service.plan_route(request)
