"""Firebase Identity Toolkit client."""

import httpx
from typing import Any, Dict, Optional
from config.settings import settings
from schemas.auth import AuthSession, SessionUser
from utils.logger import setup_logger

logger = setup_logger(__name__)

# Provider error codes and the message shown to the user
AUTH_MESSAGES = {
    "EMAIL_EXISTS": "An account with this email already exists",
    "EMAIL_NOT_FOUND": "Invalid email or password",
    "INVALID_PASSWORD": "Invalid email or password",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password",
    "INVALID_EMAIL": "Invalid email address",
    "USER_DISABLED": "This account has been disabled",
    "USER_NOT_FOUND": "Account not found",
    "WEAK_PASSWORD": "Password should be at least 6 characters",
    "INVALID_ID_TOKEN": "Your session has expired, please sign in again",
    "TOKEN_EXPIRED": "Your session has expired, please sign in again",
    "CREDENTIAL_TOO_OLD_LOGIN_AGAIN": "Please sign in again to continue",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts, try again later",
    "INVALID_IDP_RESPONSE": "Google sign-in failed",
}

# Codes meaning the session is no longer valid
SESSION_CODES = {"INVALID_ID_TOKEN", "TOKEN_EXPIRED", "CREDENTIAL_TOO_OLD_LOGIN_AGAIN", "USER_NOT_FOUND"}


class AuthError(Exception):
    """Identity provider failure with a user-facing message."""

    def __init__(self, code: str, message: Optional[str] = None):
        self.code = code
        self.message = message or AUTH_MESSAGES.get(code, "Authentication failed")
        super().__init__(f"{code}: {self.message}")

    @property
    def is_session_error(self) -> bool:
        return self.code in SESSION_CODES


class IdentityProvider:
    """Client for the Firebase Identity Toolkit REST API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = settings.firebase_api_key if api_key is None else api_key
        self.base_url = base_url or settings.firebase_auth_url
        self._client = client

    async def _post(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Call an accounts:* method and return the JSON body."""
        if not self.api_key:
            logger.warning("Firebase API key not configured")
            raise AuthError("CONFIGURATION", "Authentication is not configured")

        url = f"{self.base_url}/accounts:{method}"
        try:
            if self._client is not None:
                response = await self._client.post(url, params={"key": self.api_key}, json=payload)
            else:
                async with httpx.AsyncClient(timeout=settings.auth_timeout) as client:
                    response = await client.post(url, params={"key": self.api_key}, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Identity provider unreachable ({method}): {e}")
            raise AuthError("UNAVAILABLE", "Authentication service unavailable") from e

        if response.status_code != 200:
            try:
                message = response.json().get("error", {}).get("message", "UNKNOWN")
            except ValueError:
                message = "UNKNOWN"
            # Messages look like "WEAK_PASSWORD : Password should be ..."
            code = message.split(":")[0].strip()
            logger.warning(f"Identity provider rejected {method}: {code}")
            raise AuthError(code)

        return response.json()

    @staticmethod
    def _session(data: Dict[str, Any]) -> AuthSession:
        return AuthSession(
            user=SessionUser(
                uid=data["localId"],
                email=data.get("email", ""),
                name=data.get("displayName", ""),
                profile_image=data.get("photoUrl", ""),
            ),
            id_token=data["idToken"],
            refresh_token=data.get("refreshToken", ""),
            expires_in=int(data.get("expiresIn", 3600)),
        )

    async def sign_up(self, email: str, password: str) -> AuthSession:
        data = await self._post("signUp", {"email": email, "password": password, "returnSecureToken": True})
        return self._session(data)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        data = await self._post(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._session(data)

    async def sign_in_with_google(self, google_id_token: str, request_uri: str = "http://localhost") -> AuthSession:
        """Exchange a Google id token obtained by the client for a session."""
        data = await self._post("signInWithIdp", {
            "postBody": f"id_token={google_id_token}&providerId=google.com",
            "requestUri": request_uri,
            "returnSecureToken": True,
            "returnIdpCredential": True,
        })
        return self._session(data)

    async def send_password_reset(self, email: str):
        await self._post("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})

    async def update_profile(self, id_token: str, display_name: str, photo_url: Optional[str] = None):
        payload = {"idToken": id_token, "displayName": display_name, "returnSecureToken": False}
        if photo_url:
            payload["photoUrl"] = photo_url
        await self._post("update", payload)

    async def update_password(self, id_token: str, new_password: str) -> AuthSession:
        data = await self._post("update", {"idToken": id_token, "password": new_password, "returnSecureToken": True})
        return self._session(data)

    async def delete(self, id_token: str):
        await self._post("delete", {"idToken": id_token})

    async def lookup(self, id_token: str) -> SessionUser:
        """Resolve the user behind an id token."""
        data = await self._post("lookup", {"idToken": id_token})
        users = data.get("users") or []
        if not users:
            raise AuthError("USER_NOT_FOUND")
        user = users[0]
        return SessionUser(
            uid=user["localId"],
            email=user.get("email", ""),
            name=user.get("displayName", ""),
            profile_image=user.get("photoUrl", ""),
        )
