"""User profile documents in MongoDB."""

from datetime import datetime
from typing import Any, Dict, Optional
from schemas.auth import SessionUser
from schemas.user import UserData
from utils.helpers import today
from utils.logger import setup_logger

logger = setup_logger(__name__)


class UserRepository:
    """Profile CRUD keyed by the identity provider uid."""

    def __init__(self, collection):
        self.collection = collection

    @staticmethod
    def _to_user(doc: Dict[str, Any]) -> UserData:
        data = {k: v for k, v in doc.items() if k != "_id"}
        data["uid"] = str(doc["_id"])
        return UserData(**data)

    async def get(self, uid: str) -> Optional[UserData]:
        """Get a profile, or None if the user has none."""
        doc = await self.collection.find_one({"_id": uid})
        if not doc:
            return None
        return self._to_user(doc)

    async def set(self, uid: str, data: Dict[str, Any]):
        """Create or merge into a profile."""
        now = datetime.utcnow()
        fields = {k: v for k, v in data.items() if k not in ("_id", "created_at")}
        fields["uid"] = uid
        fields["updated_at"] = now
        await self.collection.update_one(
            {"_id": uid},
            {"$set": fields, "$setOnInsert": {"created_at": data.get("created_at") or now}},
            upsert=True,
        )

    async def update(self, uid: str, data: Dict[str, Any]) -> bool:
        """Update fields of an existing profile.

        Returns:
            False when no profile exists for the uid
        """
        result = await self.collection.update_one(
            {"_id": uid},
            {"$set": {**data, "updated_at": datetime.utcnow()}},
        )
        return result.matched_count > 0

    async def append_weight(self, uid: str, weight: float) -> bool:
        result = await self.collection.update_one(
            {"_id": uid},
            {"$push": {"weight_data": weight}, "$set": {"updated_at": datetime.utcnow()}},
        )
        return result.matched_count > 0

    async def delete(self, uid: str) -> bool:
        result = await self.collection.delete_one({"_id": uid})
        return result.deleted_count > 0

    async def count(self) -> int:
        return await self.collection.count_documents({})

    async def ensure_profile(self, session_user: SessionUser) -> UserData:
        """Return the profile of a signed-in user, creating it on first sign-in."""
        existing = await self.get(session_user.uid)
        if existing:
            return existing
        logger.info(f"Creating profile for user {session_user.uid}")
        await self.set(session_user.uid, {
            "email": session_user.email,
            "name": session_user.name,
            "last_reset_date": today().isoformat(),
        })
        return await self.get(session_user.uid)

    async def reset_if_new_day(self, user: UserData) -> UserData:
        """Zero steps and water the first time a profile is read on a new day."""
        day = today().isoformat()
        if user.last_reset_date == day:
            return user
        await self.update(user.uid, {"steps": 0, "water_intake": 0.0, "last_reset_date": day})
        logger.info(f"Daily reset of steps and water for user {user.uid}")
        return user.model_copy(update={"steps": 0, "water_intake": 0.0, "last_reset_date": day})
