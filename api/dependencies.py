"""Dependency providers for routes."""

from fastapi import Depends, HTTPException
from fastapi.requests import HTTPConnection
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from config.settings import settings
from models.database import (
    get_daily_activity_collection,
    get_logins_collection,
    get_missions_collection,
    get_users_collection,
)
from schemas.auth import SessionUser
from services.account_service import AccountService
from services.activity_repository import ActivityRepository
from services.auth_service import AuthError, IdentityProvider
from services.bmi_notifier import BmiChangeNotifier
from services.mission_repository import MissionRepository
from services.mission_service import MissionService
from services.profile_service import ProfileService
from services.stats_service import StatsService
from services.step_counter import StepCounter
from services.user_repository import UserRepository
from utils.logger import setup_logger

logger = setup_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_notifier(connection: HTTPConnection) -> BmiChangeNotifier:
    """Notifier created in the application lifespan."""
    return connection.app.state.notifier


def get_step_counter(connection: HTTPConnection) -> StepCounter:
    return connection.app.state.step_counter


def get_identity_provider() -> IdentityProvider:
    return IdentityProvider()


def get_user_repository() -> UserRepository:
    return UserRepository(get_users_collection())


def get_mission_repository() -> MissionRepository:
    return MissionRepository(get_missions_collection())


def get_activity_repository() -> ActivityRepository:
    return ActivityRepository(get_daily_activity_collection(), get_logins_collection())


def get_mission_service(
    missions: MissionRepository = Depends(get_mission_repository),
    users: UserRepository = Depends(get_user_repository),
    notifier: BmiChangeNotifier = Depends(get_notifier),
) -> MissionService:
    return MissionService(missions, users, notifier)


def get_profile_service(
    users: UserRepository = Depends(get_user_repository),
    activity: ActivityRepository = Depends(get_activity_repository),
    notifier: BmiChangeNotifier = Depends(get_notifier),
    missions: MissionService = Depends(get_mission_service),
    step_counter: StepCounter = Depends(get_step_counter),
) -> ProfileService:
    return ProfileService(users, activity, notifier, missions, step_counter)


def get_account_service(
    identity: IdentityProvider = Depends(get_identity_provider),
    users: UserRepository = Depends(get_user_repository),
    missions: MissionRepository = Depends(get_mission_repository),
    activity: ActivityRepository = Depends(get_activity_repository),
) -> AccountService:
    return AccountService(identity, users, missions, activity)


def get_stats_service(
    activity: ActivityRepository = Depends(get_activity_repository),
    users: UserRepository = Depends(get_user_repository),
) -> StatsService:
    return StatsService(activity, users)


def get_id_token(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return credentials.credentials


async def get_current_user(
    id_token: str = Depends(get_id_token),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> SessionUser:
    """Signed-in user behind the bearer token."""
    try:
        return await identity.lookup(id_token)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)


def is_admin(user: SessionUser) -> bool:
    return bool(settings.admin_email) and user.email.lower() == settings.admin_email.lower()


async def require_admin(user: SessionUser = Depends(get_current_user)) -> SessionUser:
    if not is_admin(user):
        logger.warning(f"Non-admin user {user.uid} denied admin access")
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
