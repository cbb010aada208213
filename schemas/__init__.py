"""Collection schemas organized by collection type."""

from schemas.enums import BmiCategory, MissionKind, MissionTier, Language, Units
from schemas.mission import (
    Mission,
    MissionGroup,
    MissionDocument,
    GeoPoint,
    UserMetrics,
    MissionToggleRequest,
    MissionsResponse,
)
from schemas.user import UserData, UserSettings, ProfileUpdate
from schemas.auth import SessionUser, AuthSession
from schemas.stats import ChartSeries, UserStats, AdminStats, TodayStats
from schemas.websocket import WebSocketMessage, WebSocketResponse

__all__ = [
    "BmiCategory",
    "MissionKind",
    "MissionTier",
    "Language",
    "Units",
    "Mission",
    "MissionGroup",
    "MissionDocument",
    "GeoPoint",
    "UserMetrics",
    "MissionToggleRequest",
    "MissionsResponse",
    "UserData",
    "UserSettings",
    "ProfileUpdate",
    "SessionUser",
    "AuthSession",
    "ChartSeries",
    "UserStats",
    "AdminStats",
    "TodayStats",
    "WebSocketMessage",
    "WebSocketResponse",
]
