"""Chart data for users and the admin dashboard."""

from collections import defaultdict
from datetime import date, timedelta
from typing import List, Optional
from config.settings import settings
from schemas.stats import AdminStats, ChartSeries, TodayStats, UserStats
from schemas.user import UserData
from services.activity_repository import ActivityRepository
from services.user_repository import UserRepository
from utils.helpers import today


def day_labels(days: List[date]) -> List[str]:
    """Labels like 19/10 for each day."""
    return [f"{d.day}/{d.month}" for d in days]


def user_stats(user: UserData) -> UserStats:
    """Steps and water for today, and the weight history."""
    return UserStats(
        steps=ChartSeries(labels=["Today"], data=[float(user.steps)]),
        water=ChartSeries(labels=["Today"], data=[user.water_intake]),
        weight=ChartSeries(
            labels=[f"Day {i + 1}" for i in range(len(user.weight_data))],
            data=list(user.weight_data),
        ),
    )


class StatsService:
    """Aggregates activity history over a window of days."""

    def __init__(self, activity: ActivityRepository, users: UserRepository):
        self.activity = activity
        self.users = users

    async def admin_stats(self, window_days: Optional[int] = None, end: Optional[date] = None) -> AdminStats:
        window = window_days or settings.stats_window_days
        end = end or today()
        days = [end - timedelta(days=i) for i in range(window - 1, -1, -1)]
        keys = [d.isoformat() for d in days]

        steps = defaultdict(list)
        water = defaultdict(list)
        weights = defaultdict(int)
        for snapshot in await self.activity.days_between(days[0], end):
            key = snapshot["date"]
            steps[key].append(snapshot.get("steps", 0))
            water[key].append(snapshot.get("water_intake", 0.0))
            weights[key] += snapshot.get("weight_entries", 0)

        logins = defaultdict(int)
        for login in await self.activity.logins_between(days[0], end):
            logins[login["date"]] += 1

        def average(values):
            return round(sum(values) / len(values), 2) if values else 0.0

        steps_series = [average(steps[k]) for k in keys]
        # Stored in liters, shown in milliliters
        water_series = [round(average(water[k]) * 1000, 2) for k in keys]
        login_series = [logins[k] for k in keys]
        weight_series = [weights[k] for k in keys]

        return AdminStats(
            labels=day_labels(days),
            steps=steps_series,
            water_ml=water_series,
            logins=login_series,
            weight_entries=weight_series,
            today=TodayStats(
                steps_average=steps_series[-1],
                water_average_ml=water_series[-1],
                app_logins=login_series[-1],
                weight_entries=weight_series[-1],
            ),
            total_users=await self.users.count(),
        )
