"""Mission collection schema."""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from .enums import BmiCategory, MissionKind, MissionTier

MISSIONS_PER_TIER = 3


class Mission(BaseModel):
    """A single mission with its structured goal."""
    title: str = Field(..., description="Display text")
    completed: bool = Field(default=False, description="Whether the mission is completed")
    manually_completed: bool = Field(
        default=False,
        description="Locked by a user action or a geofence arrival, immune to automatic evaluation"
    )
    kind: Optional[MissionKind] = Field(None, description="Goal kind; inferred from the title when missing")
    target: Optional[float] = Field(None, description="Numeric goal (km or liters)")
    unit: Optional[str] = Field(None, description="Unit of the numeric goal")


class MissionGroup(BaseModel):
    """Daily, weekly and special missions, three slots each."""
    daily_missions: List[Mission] = Field(..., description="Daily missions")
    weekly_missions: List[Mission] = Field(..., description="Weekly missions")
    special_missions: List[Mission] = Field(..., description="Special missions")

    @field_validator("daily_missions", "weekly_missions", "special_missions")
    @classmethod
    def check_slots(cls, missions: List[Mission]) -> List[Mission]:
        if len(missions) != MISSIONS_PER_TIER:
            raise ValueError(f"a tier holds exactly {MISSIONS_PER_TIER} missions")
        return missions

    def tier(self, tier: MissionTier) -> List[Mission]:
        return getattr(self, tier.value)


class MissionDocument(MissionGroup):
    """Stored mission document, one per user and BMI category."""
    user_id: str = Field(..., description="User identifier")
    bmi_category: BmiCategory = Field(..., description="Category the group belongs to")
    updated_at: Optional[datetime] = Field(None, description="Last save time")


class GeoPoint(BaseModel):
    """Latitude/longitude pair in degrees."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class UserMetrics(BaseModel):
    """Live signals the evaluator reads."""
    steps: int = Field(default=0, ge=0)
    water_intake_liters: float = Field(default=0.0, ge=0)
    current_position: Optional[GeoPoint] = None
    target_position: Optional[GeoPoint] = None


class MissionToggleRequest(BaseModel):
    """User toggle of a single mission."""
    tier: MissionTier = Field(..., description="Tier holding the mission")
    index: int = Field(..., ge=0, lt=MISSIONS_PER_TIER, description="Slot index")
    completed: bool = Field(..., description="New completion state")


class MissionsResponse(BaseModel):
    """Missions of the active category."""
    user_id: str
    bmi_category: BmiCategory
    missions: MissionGroup
    saved: bool = Field(default=True, description="False when the last save attempt failed")
