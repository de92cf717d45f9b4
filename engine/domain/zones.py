# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Coordinate to administrative zone (ward) resolution.
"""

import math
from types import MappingProxyType
from typing import Sequence, Tuple
from models.reference import ReferenceData, ZoneBoundary


def point_in_polygon(latitude: float, longitude: float, polygon: Sequence[Tuple[float, float]]) -> bool:
    """
    Ray-casting point-in-polygon test.

    Args:
        latitude: Point latitude
        longitude: Point longitude
        polygon: Vertices as (latitude, longitude) pairs

    Returns:
        True if the point lies inside the polygon
    """
    inside = False
    count = len(polygon)
    for i in range(count):
        lat_i, lng_i = polygon[i]
        lat_j, lng_j = polygon[i - 1]
        if (lng_i > longitude) != (lng_j > longitude):
            crossing = (lat_j - lat_i) * (longitude - lng_i) / (lng_j - lng_i) + lat_i
            if latitude < crossing:
                inside = not inside
    return inside


def boundary_contains(boundary: ZoneBoundary, latitude: float, longitude: float) -> bool:
    """Check if a point satisfies every configured part of a boundary."""
    if boundary.min_latitude is not None and not latitude > boundary.min_latitude:
        return False
    if boundary.max_latitude is not None and not latitude <= boundary.max_latitude:
        return False
    if boundary.polygon and not point_in_polygon(latitude, longitude, boundary.polygon):
        return False
    return True


def is_valid_coordinate(latitude, longitude) -> bool:
    """Check coordinates are finite numbers within range."""
    if isinstance(latitude, bool) or isinstance(longitude, bool):
        return False
    if not isinstance(latitude, (int, float)) or not isinstance(longitude, (int, float)):
        return False
    if not math.isfinite(latitude) or not math.isfinite(longitude):
        return False
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


class GeoZoneResolver:
    """Maps coordinates to a zone id; total over every input."""

    def __init__(self, reference_data: ReferenceData):
        self.default_zone_id = reference_data.default_zone_id
        self._zones = tuple(zone for zone in reference_data.zones if zone.boundary is not None)
        self._names = MappingProxyType({zone.id: zone.name for zone in reference_data.zones})

    def resolve_zone(self, latitude: float, longitude: float) -> str:
        """
        Resolve the zone containing a point.

        Zones are tested in configured order. Points outside every boundary,
        and invalid coordinates, resolve to the default zone.
        """
        if not is_valid_coordinate(latitude, longitude):
            return self.default_zone_id

        for zone in self._zones:
            if boundary_contains(zone.boundary, latitude, longitude):
                return zone.id

        return self.default_zone_id

    def zone_name(self, zone_id: str) -> str:
        """Display name for a zone id."""
        return self._names.get(zone_id, "Unknown Ward")

    def known_zone_ids(self) -> Tuple[str, ...]:
        """All configured zone ids."""
        return tuple(self._names)
