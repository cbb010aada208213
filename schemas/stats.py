"""Statistics schemas."""

from pydantic import BaseModel, Field
from typing import List


class ChartSeries(BaseModel):
    """Labels and values for one chart."""
    labels: List[str] = Field(default_factory=list)
    data: List[float] = Field(default_factory=list)


class UserStats(BaseModel):
    steps: ChartSeries
    water: ChartSeries
    weight: ChartSeries


class TodayStats(BaseModel):
    steps_average: float = 0.0
    water_average_ml: float = 0.0
    app_logins: int = 0
    weight_entries: int = 0


class AdminStats(BaseModel):
    """Dashboard figures for the last days."""
    labels: List[str]
    steps: List[float]
    water_ml: List[float]
    logins: List[int]
    weight_entries: List[int]
    today: TodayStats
    total_users: int = 0
