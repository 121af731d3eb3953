import pytest
from datetime import datetime, timezone
from unittest.mock import Mock

from journeyapi.core.exceptions import NotFoundError
from journeyapi.models.journey import DealType
from journeyapi.schemas.route import Coordinates, RoutePlanRequest
from journeyapi.schemas.vendor import Vendor
from journeyapi.services.route_service import RouteService
from journeyapi.utils.geo import haversine_miles


@pytest.fixture
def route_service(settings, catalog):
    return RouteService(settings, catalog)


class TestBuildRoute:
    def test_empty_vendor_list_gives_empty_route(self, route_service, downtown):
        route = route_service.build_route([], downtown)

        assert route.stops == []
        assert route.total_distance == 0
        assert route.estimated_time == 0

    def test_single_vendor_distance_is_direct(self, route_service, catalog, downtown):
        vendor = catalog.get("v2")

        route = route_service.build_route(["v2"], downtown)

        direct = haversine_miles(
            downtown.latitude, downtown.longitude, vendor.latitude, vendor.longitude
        )
        assert route.vendor_ids == ["v2"]
        assert route.total_distance == pytest.approx(direct)
        assert route.stops[0].distance == pytest.approx(direct)

    def test_orders_nearest_first(self, route_service, downtown):
        route = route_service.build_route(["v3", "v2", "v1", "v5"], downtown)

        distances = [stop.distance for stop in route.stops]
        assert distances == sorted(distances)
        assert route.vendor_ids[0] == "v1"

    def test_total_distance_chains_stops(self, route_service, catalog, downtown):
        route = route_service.build_route(["v1", "v4", "v2"], downtown)

        points = [(downtown.latitude, downtown.longitude)] + [
            (s.latitude, s.longitude) for s in route.stops
        ]
        expected = sum(
            haversine_miles(*points[i], *points[i + 1]) for i in range(len(points) - 1)
        )
        assert route.total_distance == pytest.approx(expected)

    def test_estimated_time_uses_speed_and_traffic(self, route_service, downtown):
        route = route_service.build_route(["v2", "v3"], downtown)

        assert route.estimated_time == pytest.approx(route.total_distance * 2.4 * 1.2)

    def test_unknown_vendor_aborts(self, route_service, downtown):
        with pytest.raises(NotFoundError) as exc_info:
            route_service.build_route(["v1", "nope"], downtown)

        assert exc_info.value.details["vendor_ids"] == ["nope"]

    def test_duplicate_ids_collapse(self, route_service, downtown):
        route = route_service.build_route(["v1", "v1", "v2"], downtown)

        assert route.vendor_ids == ["v1", "v2"]

    def test_partner_wins_distance_tie(self, settings, downtown):
        twin = dict(latitude=61.3, longitude=-149.9)
        catalog = Mock()
        catalog.get_many.return_value = {
            "a": Vendor(id="a", name="Alpha", is_partner=False, **twin),
            "b": Vendor(id="b", name="Bravo", is_partner=True, **twin),
        }

        route = RouteService(settings, catalog).build_route(["a", "b"], downtown)

        assert route.vendor_ids == ["b", "a"]


class TestPlanRoute:
    # Monday in Anchorage
    MONDAY = datetime(2026, 10, 19, 20, 0, tzinfo=timezone.utc)

    def test_birthday_deals_within_distance(self, route_service, downtown):
        request = RoutePlanRequest(
            deal_type=DealType.BIRTHDAY, start_location=downtown, max_distance=4
        )

        route = route_service.plan_route(request, now=self.MONDAY)

        # v3 has no birthday deal, v2 is beyond 4 miles
        assert route.vendor_ids == ["v1", "v5", "v4"]

    def test_daily_deals_for_today(self, route_service, downtown):
        request = RoutePlanRequest(deal_type=DealType.DAILY, start_location=downtown)

        route = route_service.plan_route(request, now=self.MONDAY)

        assert set(route.vendor_ids) == {"v1", "v3"}

    def test_special_deals_in_window(self, route_service, downtown):
        solstice = datetime(2026, 12, 20, tzinfo=timezone.utc)
        request = RoutePlanRequest(deal_type=DealType.SPECIAL, start_location=downtown)

        route = route_service.plan_route(request, now=solstice)

        assert route.vendor_ids == ["v1"]

    def test_skip_partner_only_and_limit(self, route_service, downtown):
        request = RoutePlanRequest(
            deal_type=DealType.BIRTHDAY,
            start_location=downtown,
            skip_vendor_ids=["v1"],
            max_vendors=2,
        )

        route = route_service.plan_route(request, now=self.MONDAY)

        assert route.vendor_ids == ["v5", "v4"]

        partners = RoutePlanRequest(
            deal_type=DealType.DAILY, start_location=downtown, partner_only=True
        )
        assert all(
            stop.is_partner for stop in route_service.plan_route(partners, now=self.MONDAY).stops
        )

    def test_no_candidates(self, route_service):
        far_away = Coordinates(latitude=0.0, longitude=0.0)
        request = RoutePlanRequest(deal_type=DealType.BIRTHDAY, start_location=far_away)

        with pytest.raises(NotFoundError):
            route_service.plan_route(request, now=self.MONDAY)
