"""Authentication request and response schemas."""

from pydantic import BaseModel, Field
from typing import Optional


class Credentials(BaseModel):
    email: str = Field(..., description="Account email")
    password: str = Field(..., description="Account password")


class RegisterRequest(Credentials):
    name: Optional[str] = Field(None, description="Display name")


class GoogleSignInRequest(BaseModel):
    id_token: str = Field(..., description="Google OAuth id token obtained by the client")
    request_uri: str = Field("http://localhost", description="Redirect URI used by the client")


class PasswordResetRequest(BaseModel):
    email: str


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class AccountDeleteRequest(BaseModel):
    password: str = Field(..., description="Current password, needed to re-authenticate")


class SessionUser(BaseModel):
    """Signed-in user as reported by the identity provider."""
    uid: str
    email: str = ""
    name: str = ""
    profile_image: str = ""


class AuthSession(BaseModel):
    """Tokens returned after signing in."""
    user: SessionUser
    id_token: str
    refresh_token: str = ""
    expires_in: int = 3600
