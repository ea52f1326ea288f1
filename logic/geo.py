"""
Coordinate helpers.

Bounds checks, longitude wrapping, viewport normalisation and the positional
jitter applied to live broadcasts.
"""

import random
from dataclasses import dataclass
from typing import Optional, Tuple

MIN_LAT, MAX_LAT = -90.0, 90.0
MIN_LNG, MAX_LNG = -180.0, 180.0


@dataclass(frozen=True)
class ViewBounds:
    """A map viewport ready to be queried.

    west > east means the box crosses the antimeridian.
    """

    north: float
    south: float
    east: float
    west: float

    @property
    def crosses_antimeridian(self) -> bool:
        return self.west > self.east

    def contains(self, lat: float, lng: float) -> bool:
        if not self.south <= lat <= self.north:
            return False
        if self.crosses_antimeridian:
            return lng >= self.west or lng <= self.east
        return self.west <= lng <= self.east


def is_valid_coordinate(lat: float, lng: float) -> bool:
    """Check that a point lies on the globe.

    Args:
        lat: Latitude in degrees.
        lng: Longitude in degrees.

    Returns:
        True if lat is in [-90, 90] and lng in [-180, 180].
    """
    return MIN_LAT <= lat <= MAX_LAT and MIN_LNG <= lng <= MAX_LNG


def clamp_latitude(lat: float) -> float:
    return max(MIN_LAT, min(MAX_LAT, lat))


def wrap_longitude(lng: float) -> float:
    """Wrap a longitude into [-180, 180].

    Values already in range are returned unchanged, so 180 stays 180.
    """
    if MIN_LNG <= lng <= MAX_LNG:
        return lng
    return ((lng + 180.0) % 360.0) - 180.0


def normalise_bounds(north: float, south: float, east: float, west: float) -> ViewBounds:
    """Turn a raw map viewport into queryable bounds.

    Web maps report longitudes past +/-180 once the world wraps, e.g. a view
    over the Pacific may come in as west=170, east=200. Such a view becomes
    west=170, east=-160 (crossing the antimeridian). A viewport 360 degrees
    wide or more covers every longitude.

    Args:
        north, south: Latitude edges. Clamped to the globe.
        east, west: Longitude edges, possibly unwrapped.

    Returns:
        ViewBounds with latitudes in [-90, 90] and longitudes in [-180, 180].
    """
    north, south = clamp_latitude(north), clamp_latitude(south)

    if east - west >= 360.0:
        return ViewBounds(north=north, south=south, east=MAX_LNG, west=MIN_LNG)

    return ViewBounds(
        north=north,
        south=south,
        east=wrap_longitude(east),
        west=wrap_longitude(west),
    )


def jitter_point(
        lat: float, lng: float, width: float, rng: Optional[random.Random] = None
) -> Tuple[float, float]:
    """Offset a point by a random amount inside a width x width box.

    0.1 degrees is roughly 11 km, enough to hide the exact location a message
    was dropped at in the live feed.

    Args:
        lat: Latitude in degrees.
        lng: Longitude in degrees.
        width: Full width of the jitter box in degrees.
        rng: Random source, defaults to the module-level generator.

    Returns:
        (lat, lng) tuple, with lat clamped and lng wrapped onto the globe.
    """
    rng = rng or random
    half = width / 2
    fuzzed_lat = lat + rng.random() * width - half
    fuzzed_lng = lng + rng.random() * width - half
    return clamp_latitude(fuzzed_lat), wrap_longitude(fuzzed_lng)
