"""Step detection from accelerometer samples."""

from typing import Dict, Iterable, Optional
from config.settings import settings
from schemas.user import MotionSample


class StepCounter:
    """Counts a step whenever the summed acceleration jumps past a threshold.

    The last reading is kept per user so consecutive batches chain.
    """

    def __init__(self, threshold: Optional[float] = None):
        self.threshold = settings.step_threshold if threshold is None else threshold
        self._last: Dict[str, float] = {}

    def count(self, user_id: str, samples: Iterable[MotionSample]) -> int:
        """Number of steps detected in a batch of samples."""
        steps = 0
        last = self._last.get(user_id, 0.0)
        for sample in samples:
            total = sample.x + sample.y + sample.z
            if abs(total - last) > self.threshold:
                steps += 1
            last = total
        self._last[user_id] = last
        return steps

    def reset(self, user_id: str):
        self._last.pop(user_id, None)
