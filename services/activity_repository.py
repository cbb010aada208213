"""Daily activity snapshots and login events."""

from datetime import date, datetime
from typing import Any, Dict, List, Optional
from utils.helpers import today
from utils.logger import setup_logger

logger = setup_logger(__name__)


class ActivityRepository:
    """Per-day history used by the statistics."""

    def __init__(self, activity_collection, logins_collection):
        self.activity = activity_collection
        self.logins = logins_collection

    async def record_day(self, user_id: str, steps: int, water_intake: float, day: Optional[date] = None):
        """Store today's steps and water for a user."""
        day_str = (day or today()).isoformat()
        await self.activity.update_one(
            {"_id": f"{user_id}_{day_str}"},
            {
                "$set": {"user_id": user_id, "date": day_str, "steps": steps, "water_intake": water_intake},
                "$setOnInsert": {"weight_entries": 0},
            },
            upsert=True,
        )

    async def record_weight_entry(self, user_id: str, day: Optional[date] = None):
        day_str = (day or today()).isoformat()
        await self.activity.update_one(
            {"_id": f"{user_id}_{day_str}"},
            {
                "$inc": {"weight_entries": 1},
                "$setOnInsert": {"user_id": user_id, "date": day_str, "steps": 0, "water_intake": 0.0},
            },
            upsert=True,
        )

    async def record_login(self, user_id: str):
        now = datetime.utcnow()
        await self.logins.insert_one({"user_id": user_id, "date": now.date().isoformat(), "at": now})

    async def days_between(self, start: date, end: date) -> List[Dict[str, Any]]:
        """Activity snapshots of every user in an inclusive date range."""
        cursor = self.activity.find({"date": {"$gte": start.isoformat(), "$lte": end.isoformat()}})
        return await cursor.to_list(length=None)

    async def logins_between(self, start: date, end: date) -> List[Dict[str, Any]]:
        cursor = self.logins.find({"date": {"$gte": start.isoformat(), "$lte": end.isoformat()}})
        return await cursor.to_list(length=None)

    async def delete_for_user(self, user_id: str) -> int:
        activity = await self.activity.delete_many({"user_id": user_id})
        logins = await self.logins.delete_many({"user_id": user_id})
        return activity.deleted_count + logins.deleted_count
