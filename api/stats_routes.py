"""Statistics routes."""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from api.dependencies import get_current_user, get_profile_service, get_stats_service, require_admin
from schemas.auth import SessionUser
from schemas.stats import AdminStats, UserStats
from services.profile_service import ProfileNotFoundError, ProfileService
from services.stats_service import StatsService, user_stats
from utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["stats"])


@router.get("/stats/me", response_model=UserStats)
async def get_user_stats(
    user: SessionUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Chart series for the signed-in user."""
    try:
        return user_stats(await profiles.get_profile(user.uid))
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail=f"No profile found for user '{user.uid}'")


@router.get("/admin/stats", response_model=AdminStats)
async def get_admin_stats(
    days: Optional[int] = Query(None, ge=1, le=90, description="Window size in days"),
    admin: SessionUser = Depends(require_admin),
    stats: StatsService = Depends(get_stats_service),
):
    """Dashboard aggregates over the last days, admin only."""
    try:
        return await stats.admin_stats(window_days=days)
    except Exception as e:
        logger.error(f"Error computing admin stats: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error computing stats: {str(e)}")
