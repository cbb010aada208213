"""Account flows tying the identity provider to stored user data."""

from typing import Optional
from schemas.auth import AuthSession, SessionUser
from services.activity_repository import ActivityRepository
from services.auth_service import AuthError, IdentityProvider
from services.mission_repository import MissionRepository
from services.user_repository import UserRepository
from utils.logger import setup_logger

logger = setup_logger(__name__)


class AccountService:
    """Registration, sign-in and account lifecycle."""

    def __init__(
        self,
        identity: IdentityProvider,
        users: UserRepository,
        missions: MissionRepository,
        activity: ActivityRepository,
    ):
        self.identity = identity
        self.users = users
        self.missions = missions
        self.activity = activity

    async def _signed_in(self, session: AuthSession) -> AuthSession:
        await self.users.ensure_profile(session.user)
        try:
            await self.activity.record_login(session.user.uid)
        except Exception as e:
            logger.error(f"Error recording login for {session.user.uid}: {e}", exc_info=True)
        return session

    async def register(self, email: str, password: str, name: Optional[str] = None) -> AuthSession:
        """Create the account, set its display name and create the profile."""
        session = await self.identity.sign_up(email, password)
        if name:
            await self.identity.update_profile(session.id_token, name)
            session.user.name = name
        await self.users.set(session.user.uid, {"email": session.user.email or email, "name": name or ""})
        logger.info(f"Registered user {session.user.uid}")
        return await self._signed_in(session)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        return await self._signed_in(await self.identity.sign_in(email, password))

    async def sign_in_with_google(self, google_id_token: str, request_uri: str) -> AuthSession:
        return await self._signed_in(await self.identity.sign_in_with_google(google_id_token, request_uri))

    async def update_account(self, id_token: str, user: SessionUser, name: str, profile_image: Optional[str]):
        """Update the provider profile and the stored profile together."""
        await self.identity.update_profile(id_token, name, profile_image)
        await self.users.update(user.uid, {"name": name, "profile_image": profile_image})

    async def change_password(self, user: SessionUser, current_password: str, new_password: str) -> AuthSession:
        """Re-authenticate with the current password, then set the new one."""
        if not user.email:
            raise AuthError("USER_NOT_FOUND")
        session = await self.identity.sign_in(user.email, current_password)
        return await self.identity.update_password(session.id_token, new_password)

    async def delete_account(self, user: SessionUser, password: str):
        """Delete the provider account after re-authentication, then all stored data."""
        if not user.email:
            raise AuthError("USER_NOT_FOUND")
        session = await self.identity.sign_in(user.email, password)
        await self.identity.delete(session.id_token)
        await self.delete_user_data(user.uid)

    async def delete_user_data(self, uid: str) -> int:
        """Remove the profile and every mission and activity document of a user."""
        deleted = 1 if await self.users.delete(uid) else 0
        deleted += await self.missions.delete_for_user(uid)
        deleted += await self.activity.delete_for_user(uid)
        logger.info(f"Deleted {deleted} documents of user {uid}")
        return deleted
