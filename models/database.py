"""Database models and connection setup."""

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from typing import Optional
from config.settings import settings
from utils.logger import setup_logger

logger = setup_logger(__name__)


class Database:
    """Database connection manager."""

    client: Optional[AsyncIOMotorClient] = None


db = Database()


async def connect_to_mongo():
    """Create database connection."""
    db.client = AsyncIOMotorClient(settings.mongodb_url)
    logger.info("Connected to MongoDB")


async def close_mongo_connection():
    """Close database connection."""
    if db.client:
        db.client.close()
        db.client = None
        logger.info("Disconnected from MongoDB")


async def init_mongo():
    """Initialize MongoDB connection and all collections with indexes."""
    await connect_to_mongo()

    database = get_database()

    # Users are keyed by uid in _id, email lookups serve the admin check
    await database.users.create_index([("email", ASCENDING)])

    # Missions are keyed "{user_id}_{category}"; cascade deletes filter on user_id
    await database.missions.create_index([("user_id", ASCENDING)])
    await database.missions.create_index(
        [("user_id", ASCENDING), ("bmi_category", ASCENDING)], unique=True
    )

    # Daily activity snapshots
    await database.daily_activity.create_index([("user_id", ASCENDING), ("date", DESCENDING)])
    await database.daily_activity.create_index([("date", DESCENDING)])

    # Login events
    await database.logins.create_index([("date", DESCENDING)])
    await database.logins.create_index([("user_id", ASCENDING)])

    logger.info("MongoDB initialized: All collections created with indexes")


def get_database():
    """Get database instance."""
    return db.client[settings.mongodb_url.rsplit("/", 1)[-1].split("?")[0]]


# Helper functions to get collections
def get_users_collection():
    """Get users collection."""
    return get_database().users


def get_missions_collection():
    """Get missions collection."""
    return get_database().missions


def get_daily_activity_collection():
    """Get daily activity collection."""
    return get_database().daily_activity


def get_logins_collection():
    """Get logins collection."""
    return get_database().logins
