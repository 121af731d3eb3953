"""
Route estimation.

Stops are ordered nearest-first from the start location (a greedy
heuristic, not an optimal tour). Distances are Haversine miles; the time
estimate assumes a flat average speed with a traffic buffer.
"""

from datetime import datetime
from typing import List, Optional
import logging

from journeyapi.config import Settings
from journeyapi.core.exceptions import NotFoundError
from journeyapi.providers.vendor_catalog import VendorCatalog
from journeyapi.schemas.route import Coordinates, Route, RouteStop, RoutePlanRequest
from journeyapi.schemas.vendor import Vendor
from journeyapi.utils.deals import current_day_of_week, has_deal
from journeyapi.utils.geo import estimate_travel_minutes, haversine_miles

logger = logging.getLogger(__name__)


class RouteService:
    def __init__(self, settings: Settings, catalog: VendorCatalog):
        self.settings = settings
        self.catalog = catalog

    def _order_stops(self, vendors: List[Vendor], start: Coordinates) -> List[RouteStop]:
        stops = [
            RouteStop(
                vendor_id=vendor.id,
                name=vendor.name,
                latitude=vendor.latitude,
                longitude=vendor.longitude,
                distance=haversine_miles(
                    start.latitude, start.longitude, vendor.latitude, vendor.longitude
                ),
                is_partner=vendor.is_partner,
                has_qr_code=vendor.has_qr_code,
            )
            for vendor in vendors
        ]
        # ties: partners first, then name
        stops.sort(key=lambda s: (s.distance, not s.is_partner, s.name))
        return stops

    def _route_from_stops(self, stops: List[RouteStop], start: Coordinates) -> Route:
        total = 0.0
        prev_lat, prev_lon = start.latitude, start.longitude
        for stop in stops:
            total += haversine_miles(prev_lat, prev_lon, stop.latitude, stop.longitude)
            prev_lat, prev_lon = stop.latitude, stop.longitude

        return Route(
            stops=stops,
            total_distance=total,
            estimated_time=estimate_travel_minutes(
                total, self.settings.MINUTES_PER_MILE, self.settings.TRAFFIC_FACTOR
            ),
        )

    def build_route(self, vendor_ids: List[str], start_location: Coordinates) -> Route:
        """Order the given vendors nearest-first and total the chained distance.

        Raises:
            NotFoundError: any vendor id is unknown; no partial route is built
        """
        # duplicates collapse to their first occurrence
        ids = list(dict.fromkeys(vendor_ids))
        if not ids:
            return Route()

        found = self.catalog.get_many(ids)
        missing = [vid for vid in ids if vid not in found]
        if missing:
            logger.warning(f"Route requested with unknown vendors: {missing}")
            raise NotFoundError(
                f"Vendor(s) not found: {', '.join(missing)}",
                details={"vendor_ids": missing},
            )

        stops = self._order_stops([found[vid] for vid in ids], start_location)
        route = self._route_from_stops(stops, start_location)
        logger.info(
            f"Built route over {len(stops)} vendors: "
            f"{route.total_distance:.2f} mi, ~{route.estimated_time:.0f} min"
        )
        return route

    def plan_route(
        self, request: RoutePlanRequest, now: Optional[datetime] = None
    ) -> Route:
        """Pick vendors offering ``deal_type`` near the start and build a route"""
        max_distance = request.max_distance or self.settings.DEFAULT_MAX_DISTANCE
        max_vendors = request.max_vendors or self.settings.DEFAULT_MAX_VENDORS
        deal_type = request.deal_type.value
        day = current_day_of_week(self.settings.TIMEZONE, now)
        skipped = set(request.skip_vendor_ids)

        candidates = [
            vendor
            for vendor in self.catalog.list_all(partner_only=request.partner_only)
            if vendor.id not in skipped and has_deal(vendor.deals, deal_type, day, now)
        ]
        stops = [
            stop
            for stop in self._order_stops(candidates, request.start_location)
            if stop.distance <= max_distance
        ][:max_vendors]

        if not stops:
            logger.info(
                f"No {deal_type} vendors within {max_distance} mi "
                f"(day={day}, skipped={len(skipped)})"
            )
            raise NotFoundError(
                f"No vendors with {deal_type} deals within {max_distance} miles",
                details={"deal_type": deal_type, "max_distance": max_distance},
            )

        return self._route_from_stops(stops, request.start_location)
