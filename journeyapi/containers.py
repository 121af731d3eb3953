from dependency_injector import containers, providers

from journeyapi.config import Settings
from journeyapi.providers.vendor_catalog import build_vendor_catalog
from journeyapi.services.auth_service import AuthService
from journeyapi.services.checkin_service import CheckinService
from journeyapi.services.favorites_service import FavoritesService
from journeyapi.services.journey_service import JourneyService
from journeyapi.services.point_service import PointService
from journeyapi.services.route_service import RouteService
from journeyapi.services.user_service import UserService
from journeyapi.services.vendor_service import VendorService


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Singleton(Settings)


class CatalogModule(containers.DeclarativeContainer):
    """Vendor catalog backend, chosen by DATA_BACKEND."""

    config = providers.DependenciesContainer()

    vendor_catalog = providers.Factory(build_vendor_catalog, settings=config.config)


class ServiceModule(containers.DeclarativeContainer):
    """Service layer dependencies.

    The request-scoped ``db`` session (and ``catalog`` where needed) are
    passed when the provider is called, see ``journeyapi.deps``.
    """

    config = providers.DependenciesContainer()

    auth_service = providers.Factory(AuthService, settings=config.config)
    user_service = providers.Factory(UserService, settings=config.config)
    point_service = providers.Factory(PointService)
    route_service = providers.Factory(RouteService, settings=config.config)
    checkin_service = providers.Factory(CheckinService, settings=config.config)
    journey_service = providers.Factory(JourneyService, settings=config.config)
    favorites_service = providers.Factory(FavoritesService)
    vendor_service = providers.Factory(VendorService)


class Container(containers.DeclarativeContainer):
    """Application container."""

    config = providers.Container(ConfigModule)
    catalog = providers.Container(CatalogModule, config=config)
    services = providers.Container(ServiceModule, config=config)
