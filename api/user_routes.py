"""Profile, settings and metrics routes."""

from fastapi import APIRouter, Depends, HTTPException
from api.dependencies import get_current_user, get_profile_service
from schemas.auth import SessionUser
from schemas.mission import MissionsResponse
from schemas.user import (
    BmiResponse,
    MotionBatch,
    ProfileUpdate,
    StepsRequest,
    UserData,
    UserSettings,
    WaterIntakeRequest,
    WeightRequest,
)
from services.bmi_service import BmiResult
from services.profile_service import ProfileNotFoundError, ProfileService, ProfileValidationError
from utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["users"])


def _bmi_response(result: BmiResult) -> BmiResponse:
    return BmiResponse(bmi=round(result.bmi, 2), category=result.category.value, description=result.description)


async def _run(call, uid: str, action: str):
    """Await a profile call and translate its errors."""
    try:
        return await call
    except ProfileValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail=f"No profile found for user '{uid}'")
    except Exception as e:
        logger.error(f"Error {action} for user {uid}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error {action}: {str(e)}")


@router.get("/me", response_model=UserData)
async def get_profile(
    user: SessionUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Profile of the signed-in user, with today's steps and water."""
    return await _run(profiles.get_profile(user.uid), user.uid, "fetching profile")


@router.put("/me/profile", response_model=BmiResponse)
async def save_profile(
    payload: ProfileUpdate,
    user: SessionUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Save name, age, height and weight; returns the new BMI."""
    result = await _run(profiles.save_profile(user.uid, payload), user.uid, "saving profile")
    return _bmi_response(result)


@router.get("/me/bmi", response_model=BmiResponse)
async def get_bmi(
    user: SessionUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    result = await _run(profiles.bmi(user.uid), user.uid, "computing BMI")
    return _bmi_response(result)


@router.put("/me/settings", response_model=UserSettings)
async def save_settings(
    payload: UserSettings,
    user: SessionUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    return await _run(profiles.save_settings(user.uid, payload), user.uid, "saving settings")


@router.post("/me/water", response_model=MissionsResponse)
async def add_water(
    payload: WaterIntakeRequest,
    user: SessionUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Log water in milliliters; returns the re-evaluated missions."""
    return await _run(profiles.add_water(user.uid, payload.amount_ml), user.uid, "logging water")


@router.post("/me/weight", response_model=BmiResponse)
async def add_weight(
    payload: WeightRequest,
    user: SessionUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    result = await _run(profiles.add_weight(user.uid, payload.weight), user.uid, "logging weight")
    return _bmi_response(result)


@router.put("/me/steps", response_model=MissionsResponse)
async def set_steps(
    payload: StepsRequest,
    user: SessionUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    return await _run(profiles.set_steps(user.uid, payload.steps), user.uid, "saving steps")


@router.post("/me/motion", response_model=MissionsResponse)
async def add_motion(
    payload: MotionBatch,
    user: SessionUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Count steps from a batch of accelerometer samples."""
    return await _run(profiles.add_motion(user.uid, payload.samples), user.uid, "counting steps")
