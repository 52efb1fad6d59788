"""Geographic calculations - Pure functions.

This module provides the distance calculation and the two threshold
classifiers (nearby and proximity) used by the alert engine.
All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass

from src.core.event import Coordinate, Event


# Earth's radius in meters
EARTH_RADIUS_M = 6_371_000.0

# Nearby tier: "in the area"
NEARBY_RADIUS_KM = 5.0

# Proximity tier: "standing right there"
PROXIMITY_RADIUS_M = 100.0


@dataclass(frozen=True)
class NearbyClassification:
    """Result of the coarse (kilometre) threshold check.

    Attributes:
        is_nearby: True if within the nearby radius
        distance_km: Distance in kilometres
    """
    is_nearby: bool
    distance_km: float


@dataclass(frozen=True)
class ProximityClassification:
    """Result of the fine (metre) threshold check.

    Attributes:
        is_in_proximity: True if within the proximity radius
        distance_meters: Distance in metres
    """
    is_in_proximity: bool
    distance_meters: float


def haversine_distance_meters(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate distance between two points using Haversine formula.

    Pure function. No bounds checking; NaN inputs yield NaN.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in meters
    """
    # Convert to radians
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    # Haversine formula
    a = (
        math.sin(delta_lat / 2) * math.sin(delta_lat / 2)
        + math.cos(lat1_rad) * math.cos(lat2_rad)
        * math.sin(delta_lon / 2) * math.sin(delta_lon / 2)
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def distance_to_event(location: Coordinate, event: Event) -> float:
    """Distance in meters from a user location to an event venue.

    Pure function.
    """
    return haversine_distance_meters(
        location.latitude,
        location.longitude,
        event.location.latitude,
        event.location.longitude,
    )


def classify_nearby(
    distance_meters: float,
    radius_km: float = NEARBY_RADIUS_KM,
) -> NearbyClassification:
    """Classify a distance against the nearby radius (inclusive).

    Pure function. A NaN distance is never nearby.
    """
    distance_km = distance_meters / 1000
    return NearbyClassification(
        is_nearby=distance_km <= radius_km,
        distance_km=distance_km,
    )


def classify_proximity(
    distance_meters: float,
    radius_meters: float = PROXIMITY_RADIUS_M,
) -> ProximityClassification:
    """Classify a distance against the proximity radius (inclusive).

    Pure function. A NaN distance is never in proximity.
    """
    return ProximityClassification(
        is_in_proximity=distance_meters <= radius_meters,
        distance_meters=distance_meters,
    )
