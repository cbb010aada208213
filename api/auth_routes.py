"""Authentication and account routes."""

from fastapi import APIRouter, Depends, HTTPException
from api.dependencies import get_account_service, get_current_user, get_id_token, is_admin
from schemas.auth import (
    AccountDeleteRequest,
    AuthSession,
    Credentials,
    GoogleSignInRequest,
    PasswordChangeRequest,
    PasswordResetRequest,
    RegisterRequest,
    SessionUser,
)
from schemas.user import AccountUpdate
from services.account_service import AccountService
from services.auth_service import AuthError
from utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def auth_http_error(e: AuthError) -> HTTPException:
    """Map a provider error to an HTTP error carrying the user message."""
    if e.code in ("CONFIGURATION", "UNAVAILABLE"):
        return HTTPException(status_code=503, detail=e.message)
    if e.is_session_error or e.code in ("INVALID_PASSWORD", "INVALID_LOGIN_CREDENTIALS", "EMAIL_NOT_FOUND"):
        return HTTPException(status_code=401, detail=e.message)
    return HTTPException(status_code=400, detail=e.message)


@router.post("/register", response_model=AuthSession)
async def register(payload: RegisterRequest, accounts: AccountService = Depends(get_account_service)):
    """Create an account and its profile."""
    try:
        return await accounts.register(payload.email, payload.password, payload.name)
    except AuthError as e:
        logger.info(f"Registration failed: {e.code}")
        raise auth_http_error(e)


@router.post("/login", response_model=AuthSession)
async def login(payload: Credentials, accounts: AccountService = Depends(get_account_service)):
    """Sign in with email and password."""
    try:
        return await accounts.sign_in(payload.email, payload.password)
    except AuthError as e:
        logger.info(f"Sign-in failed: {e.code}")
        raise auth_http_error(e)


@router.post("/google", response_model=AuthSession)
async def login_with_google(payload: GoogleSignInRequest, accounts: AccountService = Depends(get_account_service)):
    """Sign in with a Google id token obtained by the client."""
    try:
        return await accounts.sign_in_with_google(payload.id_token, payload.request_uri)
    except AuthError as e:
        logger.info(f"Google sign-in failed: {e.code}")
        raise auth_http_error(e)


@router.post("/logout")
async def logout(user: SessionUser = Depends(get_current_user)):
    """Tokens live on the client; signing out only needs acknowledging."""
    logger.info(f"User {user.uid} signed out")
    return {"status": "signed_out"}


@router.post("/password-reset")
async def send_password_reset(payload: PasswordResetRequest, accounts: AccountService = Depends(get_account_service)):
    try:
        await accounts.identity.send_password_reset(payload.email)
    except AuthError as e:
        raise auth_http_error(e)
    return {"status": "sent"}


@router.post("/password", response_model=AuthSession)
async def change_password(
    payload: PasswordChangeRequest,
    user: SessionUser = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    """Change the password after re-authenticating with the current one."""
    try:
        return await accounts.change_password(user, payload.current_password, payload.new_password)
    except AuthError as e:
        raise auth_http_error(e)


@router.get("/me")
async def current_session(user: SessionUser = Depends(get_current_user)):
    return {**user.model_dump(), "is_admin": is_admin(user)}


@router.put("/me")
async def update_account(
    payload: AccountUpdate,
    id_token: str = Depends(get_id_token),
    user: SessionUser = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    """Update display name and picture."""
    try:
        await accounts.update_account(id_token, user, payload.name, payload.profile_image)
    except AuthError as e:
        raise auth_http_error(e)
    return {"status": "updated"}


@router.delete("/me")
async def delete_account(
    payload: AccountDeleteRequest,
    user: SessionUser = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    """Delete the account and every document of the user."""
    try:
        await accounts.delete_account(user, payload.password)
    except AuthError as e:
        raise auth_http_error(e)
    except Exception as e:
        logger.error(f"Error deleting account {user.uid}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error deleting account: {str(e)}")
    return {"status": "deleted"}
