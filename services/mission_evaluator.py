"""Mission progress evaluation against live user metrics."""

import re
from typing import List, Tuple
from schemas.enums import MissionKind, MissionTier
from schemas.mission import Mission, MissionGroup, UserMetrics
from utils.helpers import extract_number

DISTANCE_PATTERN = re.compile(r'\d+(\.\d+)?\s*km', re.IGNORECASE)
HYDRATION_PATTERN = re.compile(r'\d+(\.\d+)?\s*l', re.IGNORECASE)
COMPOSITE_MARKERS = ("complete all", "completar todas")

METERS_PER_KM = 1000
# One step is counted as one meter
METERS_PER_STEP = 1

AUTO_KINDS = (MissionKind.DISTANCE, MissionKind.HYDRATION)


def infer_kind(mission: Mission, tier: MissionTier, index: int) -> MissionKind:
    """Goal kind of a mission, read from the title when none is stored."""
    if mission.kind is not None:
        return mission.kind
    title = mission.title
    if index < 2:
        if DISTANCE_PATTERN.search(title):
            return MissionKind.DISTANCE
        if HYDRATION_PATTERN.search(title):
            return MissionKind.HYDRATION
        return MissionKind.MANUAL
    if any(marker in title.lower() for marker in COMPOSITE_MARKERS):
        return MissionKind.COMPOSITE
    if tier == MissionTier.SPECIAL:
        return MissionKind.GEOFENCE
    return MissionKind.MANUAL


def mission_target(mission: Mission) -> float:
    """Numeric goal; parsed from the title when none is stored."""
    if mission.target is not None:
        return mission.target
    return extract_number(mission.title)


def normalize(group: MissionGroup) -> MissionGroup:
    """Copy of a group with kind and target filled in on every mission."""
    normalized = group.model_copy(deep=True)
    for tier in MissionTier:
        for index, mission in enumerate(normalized.tier(tier)):
            mission.kind = infer_kind(mission, tier, index)
            if mission.kind in AUTO_KINDS and mission.target is None:
                mission.target = extract_number(mission.title)
    return normalized


def preserve_manual_completion(group: MissionGroup) -> bool:
    """Force manually completed missions back to completed. Returns True on change."""
    changed = False
    for tier in MissionTier:
        for mission in group.tier(tier):
            if mission.manually_completed and not mission.completed:
                mission.completed = True
                changed = True
    return changed


def _auto_should(mission: Mission, kind: MissionKind, metrics: UserMetrics) -> bool:
    target = mission_target(mission)
    if kind == MissionKind.DISTANCE:
        return metrics.steps * METERS_PER_STEP >= target * METERS_PER_KM
    return metrics.water_intake_liters >= target


def _daily_goals_met(daily: List[Mission]) -> bool:
    goals = [m for m in daily if m.kind in AUTO_KINDS]
    return bool(goals) and all(m.completed for m in goals)


def evaluate(group: MissionGroup, metrics: UserMetrics) -> Tuple[MissionGroup, bool]:
    """Recompute completion flags of a mission group.

    Distance and hydration missions always follow the metrics, in both
    directions. Composite missions follow the daily distance and hydration
    missions unless manually completed. Manual and geofence missions keep
    their state; the geofence tracker owns the latter.

    Args:
        group: Current missions; left untouched
        metrics: Steps and water intake of the user

    Returns:
        The updated copy and whether any flag changed
    """
    updated = normalize(group)
    changed = False

    # Daily goes first so composites see this pass's daily values
    for tier in (MissionTier.DAILY, MissionTier.WEEKLY, MissionTier.SPECIAL):
        for mission in updated.tier(tier):
            should = mission.completed
            if mission.kind in AUTO_KINDS:
                should = _auto_should(mission, mission.kind, metrics)
            elif mission.kind == MissionKind.COMPOSITE and not mission.manually_completed:
                should = _daily_goals_met(updated.daily_missions)

            if mission.manually_completed and mission.kind not in AUTO_KINDS:
                should = True

            if should != mission.completed:
                mission.completed = should
                changed = True

    return updated, changed
