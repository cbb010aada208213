"""Mission routes."""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from api.dependencies import get_current_user, get_mission_service
from schemas.auth import SessionUser
from schemas.enums import BmiCategory
from schemas.mission import MissionsResponse, MissionToggleRequest
from services.mission_service import MissionLockedError, MissionService
from utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/v1/missions", tags=["missions"])


@router.get("", response_model=MissionsResponse)
async def get_missions(
    category: Optional[BmiCategory] = Query(None, description="Category to show instead of the current one"),
    user: SessionUser = Depends(get_current_user),
    missions: MissionService = Depends(get_mission_service),
):
    """
    Missions of the user's current BMI category.
    Defaults are created on first access and flags are re-evaluated
    against today's steps and water.
    """
    try:
        return await missions.get_missions(user.uid, category=category)
    except Exception as e:
        logger.error(f"Error fetching missions for {user.uid}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching missions: {str(e)}")


@router.patch("/toggle", response_model=MissionsResponse)
async def toggle_mission(
    payload: MissionToggleRequest,
    user: SessionUser = Depends(get_current_user),
    missions: MissionService = Depends(get_mission_service),
):
    """Check or uncheck a manual or composite mission."""
    try:
        return await missions.toggle(user.uid, payload.tier, payload.index, payload.completed)
    except MissionLockedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Error toggling mission for {user.uid}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error toggling mission: {str(e)}")
