"""
Great-circle distance helpers.

Distances are in statute miles throughout the service.
"""

import math

EARTH_RADIUS_MILES = 3958.8
METERS_PER_MILE = 1609.344


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance between two (lat, lon) points in miles"""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def estimate_travel_minutes(
    distance_miles: float, minutes_per_mile: float, traffic_factor: float
) -> float:
    """Rough driving time: distance x minutes-per-mile x traffic buffer"""
    return distance_miles * minutes_per_mile * traffic_factor


def miles_to_meters(distance_miles: float) -> float:
    return distance_miles * METERS_PER_MILE
