"""Profile, settings and daily metrics of a user."""

from typing import Iterable
from schemas.mission import MissionsResponse, UserMetrics
from schemas.user import MotionSample, ProfileUpdate, UserData, UserSettings
from services.activity_repository import ActivityRepository
from services.bmi_notifier import BmiChangeNotifier
from services.bmi_service import BmiResult, classify
from services.mission_service import MissionService
from services.step_counter import StepCounter
from services.user_repository import UserRepository
from utils.logger import setup_logger

logger = setup_logger(__name__)


class ProfileValidationError(ValueError):
    """Missing or invalid profile input."""


class ProfileNotFoundError(LookupError):
    """The user has no profile document."""


class ProfileService:
    """Profile edits and metrics updates, each followed by mission evaluation."""

    def __init__(
        self,
        users: UserRepository,
        activity: ActivityRepository,
        notifier: BmiChangeNotifier,
        missions: MissionService,
        step_counter: StepCounter,
    ):
        self.users = users
        self.activity = activity
        self.notifier = notifier
        self.missions = missions
        self.step_counter = step_counter

    async def get_profile(self, uid: str) -> UserData:
        user = await self.users.get(uid)
        if user is None:
            raise ProfileNotFoundError(uid)
        return await self.users.reset_if_new_day(user)

    async def save_profile(self, uid: str, update: ProfileUpdate) -> BmiResult:
        """Save name, age, height and a new weight entry, then publish the new category."""
        if not update.name or not update.age or not update.height or not update.weight:
            raise ProfileValidationError("Please fill in all required fields")
        if update.height <= 0 or update.weight <= 0:
            raise ProfileValidationError("Height and weight must be positive")

        await self.get_profile(uid)
        await self.users.update(uid, {"name": update.name, "age": update.age, "height": update.height})
        await self.users.append_weight(uid, update.weight)
        await self.activity.record_weight_entry(uid)

        result = classify(update.weight, update.height)
        await self.notifier.publish(uid, result.category)
        logger.info(f"Profile saved for user {uid}, BMI {result.bmi:.1f}")
        return result

    async def add_weight(self, uid: str, weight: float) -> BmiResult:
        """Append a weight entry and publish the resulting category."""
        if weight <= 0:
            raise ProfileValidationError("Weight must be positive")
        user = await self.get_profile(uid)
        await self.users.append_weight(uid, weight)
        await self.activity.record_weight_entry(uid)

        result = classify(weight, user.height)
        await self.notifier.publish(uid, result.category)
        return result

    async def bmi(self, uid: str) -> BmiResult:
        user = await self.get_profile(uid)
        if not user.weight_data:
            return classify(None, user.height)
        return classify(user.weight_data[-1], user.height)

    async def add_water(self, uid: str, amount_ml: float) -> MissionsResponse:
        if amount_ml <= 0:
            raise ProfileValidationError("Amount must be positive")
        user = await self.get_profile(uid)
        water = user.water_intake + amount_ml / 1000
        await self.users.update(uid, {"water_intake": water})
        return await self._metrics_changed(uid, user.steps, water)

    async def set_steps(self, uid: str, steps: int) -> MissionsResponse:
        user = await self.get_profile(uid)
        await self.users.update(uid, {"steps": steps})
        return await self._metrics_changed(uid, steps, user.water_intake)

    async def add_motion(self, uid: str, samples: Iterable[MotionSample]) -> MissionsResponse:
        """Count steps in accelerometer samples and add them to today's total."""
        user = await self.get_profile(uid)
        detected = self.step_counter.count(uid, samples)
        if detected == 0:
            return await self.missions.get_missions(uid)
        steps = user.steps + detected
        await self.users.update(uid, {"steps": steps})
        return await self._metrics_changed(uid, steps, user.water_intake)

    async def save_settings(self, uid: str, user_settings: UserSettings) -> UserSettings:
        await self.get_profile(uid)
        await self.users.update(uid, {"settings": user_settings.model_dump(mode="json")})
        return user_settings

    async def _metrics_changed(self, uid: str, steps: int, water: float) -> MissionsResponse:
        try:
            await self.activity.record_day(uid, steps, water)
        except Exception as e:
            logger.error(f"Error recording activity for user {uid}: {e}", exc_info=True)
        metrics = UserMetrics(steps=steps, water_intake_liters=water)
        return await self.missions.get_missions(uid, metrics=metrics)
