"""Tests for services.mission_service, backed by in-memory collections."""

import pytest
from unittest.mock import AsyncMock

from schemas.enums import BmiCategory, MissionTier
from schemas.mission import GeoPoint
from services.geofence import GeofenceTracker
from services.mission_catalog import create_default_missions
from services.mission_service import MissionLockedError


class TestGetMissions:
    @pytest.mark.asyncio
    async def test_first_access_seeds_and_saves_defaults(self, mission_service, users_collection, missions_collection, user_doc):
        users_collection.docs["user-1"] = user_doc()
        result = await mission_service.get_missions("user-1")

        assert result.bmi_category == BmiCategory.NORMAL
        assert result.missions == create_default_missions(BmiCategory.NORMAL)
        assert result.saved is True
        assert "user-1_normal" in missions_collection.docs

    @pytest.mark.asyncio
    async def test_category_from_profile(self, mission_service, users_collection, notifier, user_doc):
        users_collection.docs["user-1"] = user_doc(height=170, weight_data=[95])
        result = await mission_service.get_missions("user-1")

        assert result.bmi_category == BmiCategory.OBESE
        assert result.missions.daily_missions[0].title == "Run 3 km"
        assert notifier.current("user-1") == BmiCategory.OBESE

    @pytest.mark.asyncio
    async def test_profile_metrics_evaluated(self, mission_service, users_collection, missions_collection, user_doc):
        users_collection.docs["user-1"] = user_doc(steps=12000, water_intake=1.0)
        result = await mission_service.get_missions("user-1")

        assert result.missions.daily_missions[0].completed is True
        assert result.missions.daily_missions[1].completed is False
        assert missions_collection.docs["user-1_normal"]["daily_missions"][0]["completed"] is True

    @pytest.mark.asyncio
    async def test_no_save_when_nothing_changed(self, mission_service, mission_repo, users_collection, user_doc):
        users_collection.docs["user-1"] = user_doc()
        await mission_service.get_missions("user-1")
        mission_repo.save = AsyncMock(return_value=True)

        await mission_service.get_missions("user-1")
        mission_repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_save_failure_keeps_in_memory_state(self, mission_service, users_collection, missions_collection, user_doc):
        users_collection.docs["user-1"] = user_doc(steps=3000)
        missions_collection.fail_writes = True

        result = await mission_service.get_missions("user-1")
        assert result.saved is False
        assert result.missions.daily_missions[0].completed is True
        assert missions_collection.docs == {}

    @pytest.mark.asyncio
    async def test_load_failure_falls_back_to_defaults(self, mission_service, mission_repo, users_collection, user_doc):
        users_collection.docs["user-1"] = user_doc()
        mission_repo.load = AsyncMock(side_effect=RuntimeError("connection lost"))

        result = await mission_service.get_missions("user-1")
        assert result.missions.daily_missions[0].title == "Walk 2 km"

    @pytest.mark.asyncio
    async def test_manual_completion_restored_on_load(self, mission_service, mission_repo, users_collection, user_doc):
        users_collection.docs["user-1"] = user_doc()
        group = create_default_missions(BmiCategory.NORMAL)
        group.daily_missions[2].manually_completed = True
        await mission_repo.save("user-1", BmiCategory.NORMAL, group)

        result = await mission_service.get_missions("user-1")
        assert result.missions.daily_missions[2].completed is True


class TestCategorySwitch:
    @pytest.mark.asyncio
    async def test_each_category_keeps_its_own_group(self, mission_service, notifier, users_collection, user_doc):
        users_collection.docs["user-1"] = user_doc()
        await mission_service.toggle("user-1", MissionTier.DAILY, 2, True)

        await notifier.publish("user-1", BmiCategory.OVERWEIGHT)
        overweight = await mission_service.get_missions("user-1")
        assert overweight.bmi_category == BmiCategory.OVERWEIGHT
        assert overweight.missions.daily_missions[2].completed is False

        await notifier.publish("user-1", BmiCategory.NORMAL)
        normal = await mission_service.get_missions("user-1")
        assert normal.missions.daily_missions[2].completed is True

    @pytest.mark.asyncio
    async def test_listener_pushes_missions_of_new_category(self, mission_service, notifier, users_collection, user_doc):
        users_collection.docs["user-1"] = user_doc()
        pushed = []

        async def send(result):
            pushed.append(result.bmi_category)

        await notifier.subscribe("user-1", mission_service.category_listener("user-1", send))
        await notifier.publish("user-1", BmiCategory.UNDERWEIGHT)
        assert pushed == [BmiCategory.NORMAL, BmiCategory.UNDERWEIGHT]


class TestToggle:
    @pytest.mark.asyncio
    async def test_toggle_manual(self, mission_service, missions_collection, users_collection, user_doc):
        users_collection.docs["user-1"] = user_doc()
        result = await mission_service.toggle("user-1", MissionTier.DAILY, 2, True)

        mission = result.missions.daily_missions[2]
        assert mission.completed is True
        assert mission.manually_completed is True
        assert missions_collection.docs["user-1_normal"]["daily_missions"][2]["manually_completed"] is True

        result = await mission_service.toggle("user-1", MissionTier.DAILY, 2, False)
        assert result.missions.daily_missions[2].completed is False

    @pytest.mark.asyncio
    async def test_toggle_composite_survives_evaluation(self, mission_service, users_collection, user_doc):
        users_collection.docs["user-1"] = user_doc()
        result = await mission_service.toggle("user-1", MissionTier.WEEKLY, 2, True)
        assert result.missions.weekly_missions[2].completed is True

        again = await mission_service.get_missions("user-1")
        assert again.missions.weekly_missions[2].completed is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tier,index", [
        (MissionTier.DAILY, 0),
        (MissionTier.WEEKLY, 1),
        (MissionTier.SPECIAL, 2),
    ])
    async def test_automatic_missions_rejected(self, mission_service, users_collection, user_doc, tier, index):
        users_collection.docs["user-1"] = user_doc()
        with pytest.raises(MissionLockedError):
            await mission_service.toggle("user-1", tier, index, True)


class TestUpdatePosition:
    @pytest.mark.asyncio
    async def test_arrival_completes_and_saves_once(self, mission_service, missions_collection, users_collection, user_doc):
        users_collection.docs["user-1"] = user_doc()
        tracker = GeofenceTracker(target=GeoPoint(lat=0.0001, lng=0.0001))

        distance, result = await mission_service.update_position("user-1", tracker, GeoPoint(lat=0.01, lng=0.01))
        assert distance > 30
        assert result is None

        distance, result = await mission_service.update_position("user-1", tracker, GeoPoint(lat=0, lng=0))
        assert distance < 30
        assert result.missions.special_missions[2].completed is True
        stored = missions_collection.docs["user-1_normal"]["special_missions"][2]
        assert stored["completed"] is True
        assert stored["manually_completed"] is True

        _, result = await mission_service.update_position("user-1", tracker, GeoPoint(lat=0, lng=0))
        assert result is None

    @pytest.mark.asyncio
    async def test_completion_survives_reevaluation(self, mission_service, users_collection, user_doc):
        users_collection.docs["user-1"] = user_doc()
        tracker = GeofenceTracker(target=GeoPoint(lat=0, lng=0))
        await mission_service.update_position("user-1", tracker, GeoPoint(lat=0, lng=0))

        result = await mission_service.get_missions("user-1")
        assert result.missions.special_missions[2].completed is True


class TestSubscribeFirst:
    @pytest.mark.asyncio
    async def test_subscription_before_any_read_keeps_profile_category(
        self, mission_service, notifier, users_collection, user_doc
    ):
        users_collection.docs["user-1"] = user_doc(height=170, weight_data=[95])

        async def send(result):
            pass

        await notifier.subscribe("user-1", mission_service.category_listener("user-1", send))

        result = await mission_service.get_missions("user-1")
        assert result.bmi_category == BmiCategory.OBESE

    @pytest.mark.asyncio
    async def test_stream_before_any_read_keeps_profile_category(
        self, mission_service, notifier, users_collection, user_doc
    ):
        users_collection.docs["user-1"] = user_doc(height=170, weight_data=[95])
        stream = notifier.stream("user-1")
        await stream.__anext__()

        result = await mission_service.get_missions("user-1")
        assert result.bmi_category == BmiCategory.OBESE
        assert await stream.__anext__() == BmiCategory.OBESE
        await stream.aclose()

    @pytest.mark.asyncio
    async def test_subscribe_missions_pushes_profile_category(
        self, mission_service, users_collection, missions_collection, user_doc
    ):
        users_collection.docs["user-1"] = user_doc(height=170, weight_data=[95])
        pushed = []

        async def send(result):
            pushed.append(result.bmi_category)

        await mission_service.subscribe_missions("user-1", send)

        assert pushed == [BmiCategory.OBESE]
        assert list(missions_collection.docs) == ["user-1_obese"]

    @pytest.mark.asyncio
    async def test_failed_first_push_unsubscribes(self, mission_service, notifier, users_collection, user_doc):
        users_collection.docs["user-1"] = user_doc()

        async def send(result):
            raise RuntimeError("socket gone")

        with pytest.raises(RuntimeError):
            await mission_service.subscribe_missions("user-1", send)
        assert notifier.subject("user-1").subscriber_count == 0
