"""Shared test fixtures and configuration.

Sets test environment variables before any app imports and provides
in-memory stand-ins for the Motor collections the repositories use.
"""

import os

# Patch env vars BEFORE any app imports
os.environ.setdefault("FIREBASE_API_KEY", "fake-firebase-key")
os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017/vitalitygo_test")
os.environ.setdefault("ADMIN_EMAIL", "admin@vitalitygo.app")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import copy
from types import SimpleNamespace

import pytest


def _matches(doc, query):
    for key, expected in query.items():
        value = doc.get(key)
        if isinstance(expected, dict):
            for op, operand in expected.items():
                if op == "$gte" and not (value is not None and value >= operand):
                    return False
                if op == "$lte" and not (value is not None and value <= operand):
                    return False
                if op == "$gt" and not (value is not None and value > operand):
                    return False
                if op == "$lt" and not (value is not None and value < operand):
                    return False
                if op == "$in" and value not in operand:
                    return False
        elif value != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    async def to_list(self, length=None):
        return self.docs if length is None else self.docs[:length]


class FakeCollection:
    """Small in-memory subset of the Motor collection API."""

    def __init__(self):
        self.docs = {}
        self._next_id = 1
        self.fail_writes = False

    def _new_id(self):
        self._next_id += 1
        return f"oid{self._next_id}"

    def _check_write(self):
        if self.fail_writes:
            raise RuntimeError("write failed")

    async def find_one(self, query):
        for doc in self.docs.values():
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None):
        query = query or {}
        return FakeCursor([copy.deepcopy(d) for d in self.docs.values() if _matches(d, query)])

    async def insert_one(self, doc):
        self._check_write()
        doc = copy.deepcopy(doc)
        doc.setdefault("_id", self._new_id())
        self.docs[doc["_id"]] = doc
        return SimpleNamespace(inserted_id=doc["_id"])

    async def replace_one(self, query, document, upsert=False):
        self._check_write()
        existing = await self.find_one(query)
        if existing is None and not upsert:
            return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)
        doc = copy.deepcopy(document)
        doc["_id"] = existing["_id"] if existing else query.get("_id", self._new_id())
        self.docs[doc["_id"]] = doc
        return SimpleNamespace(
            matched_count=1 if existing else 0,
            modified_count=1 if existing else 0,
            upserted_id=None if existing else doc["_id"],
        )

    async def update_one(self, query, update, upsert=False):
        self._check_write()
        target = None
        for doc in self.docs.values():
            if _matches(doc, query):
                target = doc
                break
        inserted = False
        if target is None:
            if not upsert:
                return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)
            target = {k: v for k, v in query.items() if not isinstance(v, dict)}
            target.setdefault("_id", self._new_id())
            target.update(copy.deepcopy(update.get("$setOnInsert", {})))
            self.docs[target["_id"]] = target
            inserted = True
        for key, value in update.get("$set", {}).items():
            target[key] = copy.deepcopy(value)
        for key, value in update.get("$inc", {}).items():
            target[key] = target.get(key, 0) + value
        for key, value in update.get("$push", {}).items():
            target.setdefault(key, []).append(value)
        return SimpleNamespace(
            matched_count=0 if inserted else 1,
            modified_count=0 if inserted else 1,
            upserted_id=target["_id"] if inserted else None,
        )

    async def delete_one(self, query):
        self._check_write()
        for key, doc in list(self.docs.items()):
            if _matches(doc, query):
                del self.docs[key]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query):
        self._check_write()
        keys = [k for k, d in self.docs.items() if _matches(d, query)]
        for key in keys:
            del self.docs[key]
        return SimpleNamespace(deleted_count=len(keys))

    async def count_documents(self, query):
        return len([d for d in self.docs.values() if _matches(d, query)])


@pytest.fixture
def users_collection():
    return FakeCollection()


@pytest.fixture
def missions_collection():
    return FakeCollection()


@pytest.fixture
def activity_collection():
    return FakeCollection()


@pytest.fixture
def logins_collection():
    return FakeCollection()


@pytest.fixture
def user_repo(users_collection):
    from services.user_repository import UserRepository
    return UserRepository(users_collection)


@pytest.fixture
def mission_repo(missions_collection):
    from services.mission_repository import MissionRepository
    return MissionRepository(missions_collection)


@pytest.fixture
def activity_repo(activity_collection, logins_collection):
    from services.activity_repository import ActivityRepository
    return ActivityRepository(activity_collection, logins_collection)


@pytest.fixture
def notifier():
    from services.bmi_notifier import BmiChangeNotifier
    return BmiChangeNotifier()


@pytest.fixture
def mission_service(mission_repo, user_repo, notifier):
    from services.mission_service import MissionService
    return MissionService(mission_repo, user_repo, notifier)


@pytest.fixture
def profile_service(user_repo, activity_repo, notifier, mission_service):
    from services.profile_service import ProfileService
    from services.step_counter import StepCounter
    return ProfileService(user_repo, activity_repo, notifier, mission_service, StepCounter())


def make_user_doc(uid="user-1", email="ana@example.com", **fields):
    """Profile document as stored, reset date set to today."""
    from utils.helpers import today
    doc = {
        "_id": uid,
        "uid": uid,
        "email": email,
        "name": "Ana",
        "weight_data": [],
        "steps": 0,
        "water_intake": 0.0,
        "last_reset_date": today().isoformat(),
    }
    doc.update(fields)
    return doc


@pytest.fixture
def user_doc():
    """Factory for stored profile documents."""
    return make_user_doc
