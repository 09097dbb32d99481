"""
Shared fixtures: test settings, an in-memory stand-in for the Motor collections and token
helpers.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-campushub")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("MONGODB_DATABASE", "campushub_test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections import defaultdict
from unittest.mock import AsyncMock, MagicMock, patch

from bson import ObjectId
import pytest

from campushub.database import db_manager
from campushub.utils.security_utils import create_access_token


def make_cursor(docs=None):
    """A Motor-like cursor: chainable sort/skip/limit, awaitable to_list, async iteration."""
    docs = list(docs or [])
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    cursor.__aiter__.return_value = docs
    return cursor


def make_collection():
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock(side_effect=lambda doc: MagicMock(inserted_id=ObjectId()))
    collection.insert_many = AsyncMock(
        side_effect=lambda docs: MagicMock(inserted_ids=[ObjectId() for _ in docs])
    )
    collection.update_one = AsyncMock(return_value=MagicMock(modified_count=1))
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=0))
    collection.count_documents = AsyncMock(return_value=0)
    collection.find = MagicMock(return_value=make_cursor())
    return collection


@pytest.fixture
def collections():
    """Mock collections keyed by name, created on first use."""
    return defaultdict(make_collection)


@pytest.fixture
def mock_db(collections):
    """Route every `db_manager.get_collection()` call to the mock collections."""
    with patch.object(db_manager, "get_collection", side_effect=lambda name: collections[name]):
        yield collections


@pytest.fixture
def admin_id():
    return str(ObjectId())


@pytest.fixture
def admin_token(admin_id):
    return create_access_token(
        {"_id": admin_id, "email": "admin@school.edu", "role": "admin", "username": "admin"}
    )


@pytest.fixture
def student_token():
    return create_access_token(
        {"_id": str(ObjectId()), "email": "student@school.edu", "role": "student", "username": "student"}
    )


@pytest.fixture
def cursor_factory():
    return make_cursor
