from journeyapi.models.base import Base
from journeyapi.models.user import User
from journeyapi.models.vendor import Vendor
from journeyapi.models.journey import Journey, JourneyStats, DealType, CheckInType
from journeyapi.models.check_in import CheckIn, UserVisit
from journeyapi.models.points import PointsLedger
from journeyapi.models.user_favorites import UserFavorite
from journeyapi.models.user_preferences import UserPreferences
from journeyapi.models.data_migration import DataMigration

__all__ = [
    "Base",
    "User",
    "Vendor",
    "Journey",
    "JourneyStats",
    "DealType",
    "CheckInType",
    "CheckIn",
    "UserVisit",
    "PointsLedger",
    "UserFavorite",
    "UserPreferences",
    "DataMigration",
]
