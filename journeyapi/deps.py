from fastapi import Depends
from sqlalchemy.orm import Session

from journeyapi.containers import Container
from journeyapi.database.session import get_db
from journeyapi.providers.vendor_catalog import VendorCatalog

# Services
from journeyapi.services.auth_service import AuthService
from journeyapi.services.user_service import UserService
from journeyapi.services.point_service import PointService
from journeyapi.services.route_service import RouteService
from journeyapi.services.checkin_service import CheckinService
from journeyapi.services.journey_service import JourneyService
from journeyapi.services.favorites_service import FavoritesService
from journeyapi.services.vendor_service import VendorService

container = Container()


def get_vendor_catalog(db: Session = Depends(get_db)) -> VendorCatalog:
    return container.catalog.vendor_catalog(db=db)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return container.services.auth_service(db=db)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return container.services.user_service(db=db)


def get_point_service(db: Session = Depends(get_db)) -> PointService:
    return container.services.point_service(db=db)


def get_route_service(
    catalog: VendorCatalog = Depends(get_vendor_catalog),
) -> RouteService:
    return container.services.route_service(catalog=catalog)


def get_checkin_service(
    db: Session = Depends(get_db),
    catalog: VendorCatalog = Depends(get_vendor_catalog),
) -> CheckinService:
    return container.services.checkin_service(db=db, catalog=catalog)


def get_journey_service(
    db: Session = Depends(get_db),
    catalog: VendorCatalog = Depends(get_vendor_catalog),
) -> JourneyService:
    return container.services.journey_service(db=db, catalog=catalog)


def get_favorites_service(
    db: Session = Depends(get_db),
    catalog: VendorCatalog = Depends(get_vendor_catalog),
) -> FavoritesService:
    return container.services.favorites_service(db=db, catalog=catalog)


def get_vendor_service(
    catalog: VendorCatalog = Depends(get_vendor_catalog),
) -> VendorService:
    return container.services.vendor_service(catalog=catalog)
