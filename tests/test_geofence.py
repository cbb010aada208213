"""Tests for services.geofence."""

import pytest

from schemas.enums import BmiCategory, MissionKind
from schemas.mission import GeoPoint, UserMetrics
from services.geofence import GeofenceTracker, complete_if_arrived, haversine_m, offset_target
from services.mission_catalog import create_default_missions
from services.mission_evaluator import evaluate


class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_m(0, 0, 0, 0) == 0

    def test_one_degree_of_latitude(self):
        assert haversine_m(0, 0, 1, 0) == pytest.approx(111195, rel=1e-3)

    def test_small_offset_is_inside_geofence(self):
        """The inside case uses 0.0001 degrees per axis, about 15.7 m at the equator."""
        assert haversine_m(0, 0, 0.0001, 0.0001) < 30

    def test_offset_of_three_ten_thousandths_is_outside(self):
        """0.0003 degrees per axis is about 47 m, outside the 30 m radius."""
        assert haversine_m(0, 0, 0.0003, 0.0003) == pytest.approx(47.2, abs=0.5)


class TestCompleteIfArrived:
    def test_completes_once(self):
        group = create_default_missions(BmiCategory.OVERWEIGHT)
        here = GeoPoint(lat=0, lng=0)
        target = GeoPoint(lat=0.0001, lng=0.0001)

        assert complete_if_arrived(group, here, target) is True
        mission = group.special_missions[2]
        assert mission.completed is True
        assert mission.manually_completed is True

        assert complete_if_arrived(group, here, target) is False
        assert mission.completed is True

    def test_far_away_does_nothing(self):
        group = create_default_missions(BmiCategory.NORMAL)
        assert complete_if_arrived(group, GeoPoint(lat=0, lng=0), GeoPoint(lat=0.0003, lng=0.0003)) is False
        assert group.special_missions[2].completed is False

    def test_only_geofence_missions(self):
        group = create_default_missions(BmiCategory.NORMAL)
        group.special_missions[2].kind = MissionKind.MANUAL
        assert complete_if_arrived(group, GeoPoint(lat=0, lng=0), GeoPoint(lat=0, lng=0)) is False

    def test_evaluation_keeps_geofence_completion(self):
        group = create_default_missions(BmiCategory.NORMAL)
        complete_if_arrived(group, GeoPoint(lat=10, lng=10), GeoPoint(lat=10, lng=10))
        updated, changed = evaluate(group, UserMetrics())
        assert updated.special_missions[2].completed is True
        assert changed is False


class TestGeofenceTracker:
    def test_first_position_sets_offset_target(self):
        tracker = GeofenceTracker()
        distance = tracker.move(GeoPoint(lat=40.0, lng=-3.0))
        assert tracker.target == offset_target(GeoPoint(lat=40.0, lng=-3.0))
        assert tracker.target.lat == pytest.approx(40.002)
        assert distance > 30

    def test_arrival(self):
        tracker = GeofenceTracker(target=GeoPoint(lat=40.002, lng=-2.998))
        group = create_default_missions(BmiCategory.NORMAL)

        tracker.move(GeoPoint(lat=40.0, lng=-3.0))
        assert tracker.check(group) is False

        tracker.move(GeoPoint(lat=40.00195, lng=-2.99805))
        assert tracker.check(group) is True
        assert tracker.check(group) is False

    def test_no_position_no_check(self):
        tracker = GeofenceTracker(target=GeoPoint(lat=0, lng=0))
        assert tracker.check(create_default_missions(BmiCategory.NORMAL)) is False
        assert tracker.distance() == 0
