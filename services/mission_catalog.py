"""Default missions per BMI category."""

from typing import Dict, Tuple
from schemas.enums import BmiCategory, MissionKind
from schemas.mission import Mission, MissionGroup

# (distance verb, daily km, daily L, daily activity,
#  weekly km, weekly L, special km, special L, special location challenge)
_TEMPLATES: Dict[BmiCategory, Tuple] = {
    BmiCategory.UNDERWEIGHT: (
        "Walk", 1, 1, "Light exercises",
        3, 5, 10, 10, "Reach the target point for a light challenge",
    ),
    BmiCategory.NORMAL: (
        "Walk", 2, 1.5, "Stretching routine",
        5, 7, 20, 15, "Reach the target point on a 30 minute mobility walk",
    ),
    BmiCategory.OVERWEIGHT: (
        "Run", 2, 2, "Strength exercises",
        10, 10, 50, 20, "Move from point A to point B",
    ),
    BmiCategory.OBESE: (
        "Run", 3, 3, "Intense training",
        15, 15, 60, 25, "Reach the target point on a high intensity challenge",
    ),
}


def _number(value: float) -> str:
    return f"{value:g}"


def distance_mission(verb: str, km: float) -> Mission:
    return Mission(
        title=f"{verb} {_number(km)} km",
        kind=MissionKind.DISTANCE,
        target=float(km),
        unit="km",
    )


def hydration_mission(liters: float) -> Mission:
    return Mission(
        title=f"Drink {_number(liters)} L of water",
        kind=MissionKind.HYDRATION,
        target=float(liters),
        unit="L",
    )


def create_default_missions(category: BmiCategory) -> MissionGroup:
    """Build a fresh default mission group for a BMI category."""
    (verb, daily_km, daily_l, activity,
     weekly_km, weekly_l, special_km, special_l, challenge) = _TEMPLATES[BmiCategory(category)]

    return MissionGroup(
        daily_missions=[
            distance_mission(verb, daily_km),
            hydration_mission(daily_l),
            Mission(title=activity, kind=MissionKind.MANUAL),
        ],
        weekly_missions=[
            distance_mission(verb, weekly_km),
            hydration_mission(weekly_l),
            Mission(title="Complete all daily missions", kind=MissionKind.COMPOSITE),
        ],
        special_missions=[
            distance_mission(verb, special_km),
            hydration_mission(special_l),
            Mission(title=challenge, kind=MissionKind.GEOFENCE),
        ],
    )
