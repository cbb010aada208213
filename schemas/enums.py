"""Enums for collection fields."""

from enum import Enum


class BmiCategory(str, Enum):
    """BMI category enum."""
    UNDERWEIGHT = "underweight"
    NORMAL = "normal"
    OVERWEIGHT = "overweight"
    OBESE = "obese"


class MissionKind(str, Enum):
    """How a mission's completion is decided."""
    DISTANCE = "distance"
    HYDRATION = "hydration"
    COMPOSITE = "composite"
    MANUAL = "manual"
    GEOFENCE = "geofence"


class MissionTier(str, Enum):
    """Mission tier, named after the group field that holds it."""
    DAILY = "daily_missions"
    WEEKLY = "weekly_missions"
    SPECIAL = "special_missions"


class Language(str, Enum):
    """Interface language."""
    EN = "en"
    ES = "es"


class Units(str, Enum):
    """Measurement system."""
    METRIC = "metric"
    IMPERIAL = "imperial"
