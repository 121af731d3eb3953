import pytest
from datetime import datetime, timezone

from journeyapi.utils.geo import (
    EARTH_RADIUS_MILES,
    estimate_travel_minutes,
    haversine_miles,
    miles_to_meters,
)
from journeyapi.utils.deals import active_special_deals, current_day_of_week, has_deal


class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_miles(61.2181, -149.9003, 61.2181, -149.9003) == 0.0

    def test_los_angeles_to_new_york(self):
        distance = haversine_miles(34.0522, -118.2437, 40.7128, -74.0060)
        assert distance == pytest.approx(2445.6, rel=0.005)

    def test_symmetric(self):
        a = haversine_miles(61.2176, -149.8953, 61.1424, -149.8663)
        b = haversine_miles(61.1424, -149.8663, 61.2176, -149.8953)
        assert a == pytest.approx(b)

    def test_one_degree_of_latitude(self):
        # arc length for one degree on a 3958.8 mile sphere
        expected = EARTH_RADIUS_MILES * 3.141592653589793 / 180
        assert haversine_miles(0, 0, 1, 0) == pytest.approx(expected)

    def test_travel_minutes(self):
        assert estimate_travel_minutes(10, 2.4, 1.2) == pytest.approx(28.8)

    def test_miles_to_meters(self):
        assert miles_to_meters(0.1) == pytest.approx(160.9344)


DEALS = {
    "birthday": {"description": "20% off"},
    "daily": {"monday": [{"description": "Munchie Monday"}], "tuesday": []},
    "special": [
        {"title": "Solstice", "startDate": "2026-12-18T00:00:00Z", "endDate": "2026-12-23T23:59:59Z"},
        {"title": "Open ended", "startDate": "2027-03-01T00:00:00Z"},
    ],
}


class TestDeals:
    def test_birthday(self):
        assert has_deal(DEALS, "birthday", "monday")
        assert not has_deal({"birthday": None}, "birthday", "monday")

    def test_daily_matches_weekday(self):
        assert has_deal(DEALS, "daily", "monday")
        assert not has_deal(DEALS, "daily", "tuesday")
        assert not has_deal(DEALS, "daily", "friday")

    def test_special_window(self):
        inside = datetime(2026, 12, 20, tzinfo=timezone.utc)
        outside = datetime(2026, 11, 1, tzinfo=timezone.utc)
        assert [d["title"] for d in active_special_deals(DEALS, inside)] == ["Solstice"]
        assert not has_deal(DEALS, "special", "monday", outside)

    def test_special_without_end_date_stays_active(self):
        later = datetime(2028, 1, 1, tzinfo=timezone.utc)
        assert [d["title"] for d in active_special_deals(DEALS, later)] == ["Open ended"]

    def test_empty_deals(self):
        assert not has_deal(None, "daily", "monday")
        assert not has_deal({}, "special", "monday")

    def test_day_of_week_uses_timezone(self):
        # 2026-10-19 05:00 UTC is Sunday evening in Anchorage
        now = datetime(2026, 10, 19, 5, 0, tzinfo=timezone.utc)
        assert current_day_of_week("UTC", now) == "monday"
        assert current_day_of_week("America/Anchorage", now) == "sunday"
