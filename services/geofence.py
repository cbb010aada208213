"""Distance to the special mission target and geofence completion."""

import math
from typing import Optional
from config.settings import settings
from schemas.enums import MissionKind, MissionTier
from schemas.mission import GeoPoint, MissionGroup
from utils.logger import setup_logger

logger = setup_logger(__name__)

EARTH_RADIUS_M = 6371e3
LOCATION_SLOT = 2


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Return the great-circle distance between two points in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lng2 - lng1)

    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def distance_between(a: Optional[GeoPoint], b: Optional[GeoPoint]) -> float:
    """Distance in meters, 0 when either point is unknown."""
    if a is None or b is None:
        return 0.0
    return haversine_m(a.lat, a.lng, b.lat, b.lng)


def offset_target(origin: GeoPoint, offset_deg: Optional[float] = None) -> GeoPoint:
    """Target placed north-east of the first known position."""
    offset = settings.target_offset_deg if offset_deg is None else offset_deg
    return GeoPoint(lat=origin.lat + offset, lng=origin.lng + offset)


def complete_if_arrived(
    group: MissionGroup,
    position: GeoPoint,
    target: GeoPoint,
    radius_m: Optional[float] = None,
) -> bool:
    """Lock the special location mission once the user is inside the geofence.

    Completion is terminal: the mission is marked manually completed, so
    later calls and later evaluations leave it alone.

    Returns:
        True only on the call that completed the mission
    """
    radius = settings.geofence_radius_m if radius_m is None else radius_m
    mission = group.tier(MissionTier.SPECIAL)[LOCATION_SLOT]
    if mission.manually_completed:
        return False
    if mission.kind not in (None, MissionKind.GEOFENCE):
        return False

    if distance_between(position, target) < radius:
        mission.completed = True
        mission.manually_completed = True
        logger.info(f"Geofence reached for mission '{mission.title}'")
        return True
    return False


class GeofenceTracker:
    """Position state of one tracking session."""

    def __init__(self, target: Optional[GeoPoint] = None, radius_m: Optional[float] = None):
        self.target = target
        self.position: Optional[GeoPoint] = None
        self.radius_m = settings.geofence_radius_m if radius_m is None else radius_m

    def set_target(self, target: GeoPoint):
        self.target = target

    def move(self, position: GeoPoint) -> float:
        """Record a new position and return the distance to the target."""
        if self.target is None:
            self.target = offset_target(position)
        self.position = position
        return self.distance()

    def distance(self) -> float:
        return distance_between(self.position, self.target)

    def check(self, group: MissionGroup) -> bool:
        """Run the geofence rule for the last known position."""
        if self.position is None or self.target is None:
            return False
        return complete_if_arrived(group, self.position, self.target, self.radius_m)
