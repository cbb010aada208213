"""User collection schema."""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from .enums import Language, Units


class UserSettings(BaseModel):
    """Per-user application settings."""
    notifications: bool = True
    language: Language = Language.ES
    units: Units = Units.METRIC

    @field_validator("language", mode="before")
    @classmethod
    def default_language(cls, value):
        return value if value in ("en", "es", Language.EN, Language.ES) else Language.ES


class UserData(BaseModel):
    """User collection model."""
    uid: str = Field(..., description="Identity provider user id")
    email: str = Field(default="", description="Account email")
    name: Optional[str] = Field(None, description="Display name")
    age: Optional[int] = Field(None, description="Age in years")
    height: Optional[float] = Field(None, description="Height in cm")
    weight_data: List[float] = Field(default_factory=list, description="Weight history in kg, latest last")
    steps: int = Field(default=0, description="Steps counted today")
    water_intake: float = Field(default=0.0, description="Water drunk today in liters")
    settings: Optional[UserSettings] = Field(None, description="Application settings")
    profile_image: Optional[str] = Field(None, description="Profile image URL")
    last_reset_date: Optional[str] = Field(None, description="Day (YYYY-MM-DD) steps and water were last reset")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    """Profile form. All fields are required to save, checked by the service."""
    name: Optional[str] = None
    age: Optional[int] = Field(None, ge=0)
    height: Optional[float] = Field(None, description="Height in cm")
    weight: Optional[float] = Field(None, description="Weight in kg")


class AccountUpdate(BaseModel):
    """Display name and picture shown by the identity provider."""
    name: str = ""
    profile_image: Optional[str] = None


class WaterIntakeRequest(BaseModel):
    amount_ml: float = Field(500, description="Amount drunk in milliliters")


class WeightRequest(BaseModel):
    weight: float = Field(..., description="Weight in kg")


class StepsRequest(BaseModel):
    steps: int = Field(..., ge=0, description="Absolute step count for today")


class MotionSample(BaseModel):
    """Accelerometer reading including gravity."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class MotionBatch(BaseModel):
    samples: List[MotionSample] = Field(default_factory=list)


class BmiResponse(BaseModel):
    bmi: float
    category: str
    description: str
