"""Mission documents in MongoDB."""

from datetime import datetime
from typing import Optional
from schemas.enums import BmiCategory
from schemas.mission import MissionGroup
from utils.logger import setup_logger

logger = setup_logger(__name__)


def mission_key(user_id: str, category: BmiCategory) -> str:
    """Document id of a user's missions for one category."""
    return f"{user_id}_{BmiCategory(category).value}"


class MissionRepository:
    """Load and save mission groups keyed by user and BMI category."""

    def __init__(self, collection):
        self.collection = collection

    async def load(self, user_id: str, category: BmiCategory) -> Optional[MissionGroup]:
        """Load the saved group, or None when the user has none for the category."""
        doc = await self.collection.find_one({"_id": mission_key(user_id, category)})
        if not doc:
            logger.info(f"No missions stored for user {user_id} in category {BmiCategory(category).value}")
            return None
        return MissionGroup(
            daily_missions=doc.get("daily_missions", []),
            weekly_missions=doc.get("weekly_missions", []),
            special_missions=doc.get("special_missions", []),
        )

    async def save(self, user_id: str, category: BmiCategory, group: MissionGroup) -> bool:
        """Replace the stored group.

        Returns:
            True if saved; failures are logged and reported as False
        """
        category = BmiCategory(category)
        document = {
            "_id": mission_key(user_id, category),
            "user_id": user_id,
            "bmi_category": category.value,
            **group.model_dump(mode="json"),
            "updated_at": datetime.utcnow(),
        }
        try:
            await self.collection.replace_one({"_id": document["_id"]}, document, upsert=True)
            logger.info(f"Saved missions for user {user_id} in category {category.value}")
            return True
        except Exception as e:
            logger.error(f"Error saving missions for user {user_id}: {e}", exc_info=True)
            return False

    async def delete_for_user(self, user_id: str) -> int:
        """Delete every mission document of a user, across categories."""
        result = await self.collection.delete_many({"user_id": user_id})
        if result.deleted_count > 0:
            logger.info(f"Deleted {result.deleted_count} mission documents for user {user_id}")
        return result.deleted_count
