"""Mission workflow: category lookup, seeding, evaluation and persistence."""

from typing import Callable, Optional, Tuple
from schemas.enums import BmiCategory, MissionKind, MissionTier
from schemas.mission import GeoPoint, MissionGroup, MissionsResponse, UserMetrics
from services.bmi_notifier import BmiChangeNotifier
from services.bmi_service import classify_user
from services.geofence import GeofenceTracker
from services.mission_catalog import create_default_missions
from services.mission_evaluator import evaluate, normalize, preserve_manual_completion
from services.mission_repository import MissionRepository
from services.user_repository import UserRepository
from utils.logger import setup_logger

logger = setup_logger(__name__)

TOGGLEABLE_KINDS = (MissionKind.MANUAL, MissionKind.COMPOSITE)


class MissionLockedError(Exception):
    """Raised when a user tries to toggle a mission they do not control."""

    def __init__(self, tier: MissionTier, index: int, kind: MissionKind):
        self.tier = tier
        self.index = index
        self.kind = kind
        super().__init__(f"{kind.value} missions complete automatically and cannot be toggled")


class MissionService:
    """Keeps a user's missions in line with their BMI category and metrics."""

    def __init__(self, missions: MissionRepository, users: UserRepository, notifier: BmiChangeNotifier):
        self.missions = missions
        self.users = users
        self.notifier = notifier

    async def current_category(self, user_id: str) -> BmiCategory:
        """Category from the notifier, seeded from the profile on first use."""
        if self.notifier.has(user_id):
            return self.notifier.current(user_id)
        user = await self.users.get(user_id)
        category = classify_user(user).category
        await self.notifier.publish(user_id, category)
        return category

    async def current_metrics(self, user_id: str) -> UserMetrics:
        user = await self.users.get(user_id)
        if user is None:
            return UserMetrics()
        user = await self.users.reset_if_new_day(user)
        return UserMetrics(steps=user.steps, water_intake_liters=user.water_intake)

    async def load_group(self, user_id: str, category: BmiCategory) -> Tuple[MissionGroup, bool]:
        """Saved group for the category, or fresh defaults.

        Returns:
            The group and whether it differs from what is stored
        """
        try:
            group = await self.missions.load(user_id, category)
        except Exception as e:
            logger.error(f"Error loading missions for user {user_id}: {e}", exc_info=True)
            group = None

        if group is None:
            logger.info(f"Creating default missions for user {user_id}, category {category.value}")
            return create_default_missions(category), True

        group = normalize(group)
        dirty = preserve_manual_completion(group)
        return group, dirty

    async def _save(self, user_id: str, category: BmiCategory, group: MissionGroup) -> bool:
        saved = await self.missions.save(user_id, category, group)
        if not saved:
            logger.warning(f"Missions of user {user_id} kept in memory until the next save")
        return saved

    async def get_missions(
        self,
        user_id: str,
        category: Optional[BmiCategory] = None,
        metrics: Optional[UserMetrics] = None,
    ) -> MissionsResponse:
        """Load, evaluate and, when anything changed, save the user's missions."""
        category = BmiCategory(category) if category else await self.current_category(user_id)
        group, dirty = await self.load_group(user_id, category)
        if metrics is None:
            metrics = await self.current_metrics(user_id)

        group, changed = evaluate(group, metrics)

        saved = True
        if dirty or changed:
            saved = await self._save(user_id, category, group)
        return MissionsResponse(user_id=user_id, bmi_category=category, missions=group, saved=saved)

    async def toggle(self, user_id: str, tier: MissionTier, index: int, completed: bool) -> MissionsResponse:
        """Apply a user's check or uncheck of a mission."""
        category = await self.current_category(user_id)
        group, _ = await self.load_group(user_id, category)

        mission = group.tier(tier)[index]
        if mission.kind not in TOGGLEABLE_KINDS:
            raise MissionLockedError(tier, index, mission.kind)

        mission.completed = completed
        mission.manually_completed = completed

        group, _ = evaluate(group, await self.current_metrics(user_id))
        saved = await self._save(user_id, category, group)
        return MissionsResponse(user_id=user_id, bmi_category=category, missions=group, saved=saved)

    async def update_position(
        self,
        user_id: str,
        tracker: GeofenceTracker,
        position: GeoPoint,
    ) -> Tuple[float, Optional[MissionsResponse]]:
        """Move the tracker and run the geofence rule.

        Returns:
            Distance to the target in meters, and the missions when this
            update completed the location mission
        """
        distance = tracker.move(position)
        category = await self.current_category(user_id)
        group, _ = await self.load_group(user_id, category)

        if not tracker.check(group):
            return distance, None

        saved = await self._save(user_id, category, group)
        return distance, MissionsResponse(user_id=user_id, bmi_category=category, missions=group, saved=saved)

    def category_listener(self, user_id: str, send):
        """Notifier callback that pushes the missions of each new category to `send`."""
        async def on_change(category: BmiCategory):
            result = await self.get_missions(user_id, category=category)
            await send(result)
        return on_change

    async def subscribe_missions(self, user_id: str, send) -> Callable[[], None]:
        """Push the missions of the current category to `send`, then of every new one.

        The category is read from the profile before subscribing, so the
        first push never falls back to the notifier's initial value.

        Returns:
            A function that removes the subscription
        """
        await self.current_category(user_id)
        return await self.notifier.subscribe(user_id, self.category_listener(user_id, send))
