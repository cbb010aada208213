"""Observable BMI category, one single-slot subject per user."""

import asyncio
from typing import AsyncIterator, Awaitable, Callable, Dict, List, Set
from schemas.enums import BmiCategory
from utils.logger import setup_logger

logger = setup_logger(__name__)

Subscriber = Callable[[BmiCategory], Awaitable[None]]


class CategorySubject:
    """Holds the latest category and replays it to every new subscriber."""

    def __init__(self, initial: BmiCategory = BmiCategory.NORMAL):
        self._value = initial
        self._subscribers: List[Subscriber] = []
        self._queues: Set[asyncio.Queue] = set()

    @property
    def value(self) -> BmiCategory:
        return self._value

    async def publish(self, category: BmiCategory):
        """Store a new category and deliver it to subscribers."""
        self._value = BmiCategory(category)
        for callback in list(self._subscribers):
            try:
                await callback(self._value)
            except Exception as e:
                logger.error(f"BMI subscriber failed: {e}", exc_info=True)
        for queue in self._queues:
            queue.put_nowait(self._value)

    async def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback, called at once with the current value.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)
        try:
            await callback(self._value)
        except Exception:
            self._subscribers.remove(callback)
            raise

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def stream(self) -> AsyncIterator[BmiCategory]:
        """Yield the current value, then every update."""
        queue: asyncio.Queue = asyncio.Queue()
        queue.put_nowait(self._value)
        self._queues.add(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._queues.discard(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers) + len(self._queues)


class BmiChangeNotifier:
    """Application-scoped registry of per-user category subjects.

    Created in the application lifespan and handed to whoever needs it.
    Subjects start at the normal category and live as long as the notifier.
    A user counts as known only once a category has been published for them;
    subscribing alone does not.
    """

    def __init__(self):
        self._subjects: Dict[str, CategorySubject] = {}
        self._published: Set[str] = set()

    def subject(self, user_id: str) -> CategorySubject:
        if user_id not in self._subjects:
            self._subjects[user_id] = CategorySubject()
        return self._subjects[user_id]

    def has(self, user_id: str) -> bool:
        """Whether a category has been published for the user."""
        return user_id in self._published

    def current(self, user_id: str) -> BmiCategory:
        return self.subject(user_id).value

    async def publish(self, user_id: str, category: BmiCategory):
        logger.info(f"BMI category for user {user_id}: {BmiCategory(category).value}")
        self._published.add(user_id)
        await self.subject(user_id).publish(category)

    async def subscribe(self, user_id: str, callback: Subscriber) -> Callable[[], None]:
        return await self.subject(user_id).subscribe(callback)

    def stream(self, user_id: str) -> AsyncIterator[BmiCategory]:
        return self.subject(user_id).stream()
