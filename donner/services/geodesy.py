"""Spherical geodesy: destination-point projection and great-circle distance.

Both functions use a spherical Earth of radius 6 371 km. Inputs are not
validated; callers pass a bearing in [0, 360) and a non-negative distance.
"""

from __future__ import annotations

import math

from donner.contracts.common import GeoPoint

EARTH_RADIUS_M = 6_371_000.0


def destination_point(
    origin: GeoPoint, bearing_deg: float, distance_m: float
) -> GeoPoint:
    """Point reached travelling ``distance_m`` from ``origin`` on ``bearing_deg``.

    Bearing is measured clockwise from true north. The output longitude is
    not wrapped into [-180, 180].
    """
    theta = math.radians(bearing_deg)
    delta = distance_m / EARTH_RADIUS_M
    phi1 = math.radians(origin.latitude)
    lambda1 = math.radians(origin.longitude)

    phi2 = math.asin(
        math.sin(phi1) * math.cos(delta)
        + math.cos(phi1) * math.sin(delta) * math.cos(theta)
    )
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * math.sin(phi2),
    )

    return GeoPoint(latitude=math.degrees(phi2), longitude=math.degrees(lambda2))


def great_circle_distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """Haversine distance in meters."""
    la1, lo1 = math.radians(a.latitude), math.radians(a.longitude)
    la2, lo2 = math.radians(b.latitude), math.radians(b.longitude)
    dlat = la2 - la1
    dlon = lo2 - lo1
    h = math.sin(dlat / 2) ** 2 + math.cos(la1) * math.cos(la2) * math.sin(dlon / 2) ** 2
    return 2 * math.asin(math.sqrt(min(1.0, h))) * EARTH_RADIUS_M


def normalize_bearing(bearing_deg: float) -> float:
    """Wrap a bearing into [0, 360)."""
    bearing = bearing_deg % 360.0
    # -1e-20 % 360.0 rounds to 360.0
    return 0.0 if bearing >= 360.0 else bearing
