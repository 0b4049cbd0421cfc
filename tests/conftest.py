from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId

from factories import make_cursor

COLLECTIONS = ("users", "groups", "expenses", "expense_splits", "settlements")


def _collection():
    collection = MagicMock()
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))
    collection.insert_many = AsyncMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.update_one = AsyncMock()
    collection.find.return_value = make_cursor([])
    return collection


@pytest.fixture
def mock_db():
    """Database double: attribute and item access return the same collection mocks."""
    db = MagicMock()
    collections = {name: _collection() for name in COLLECTIONS}
    for name, collection in collections.items():
        setattr(db, name, collection)
    db.__getitem__.side_effect = lambda name: collections[name]

    # async with await db.client.start_session() as session:
    #     async with session.start_transaction(): ...
    session = MagicMock()
    session_cm = MagicMock()
    session_cm.__aenter__.return_value = session
    db.client.start_session = AsyncMock(return_value=session_cm)
    db.session = session
    return db


@pytest.fixture
def alice():
    return ObjectId()


@pytest.fixture
def bob():
    return ObjectId()


@pytest.fixture
def charlie():
    return ObjectId()


@pytest.fixture
def group_doc(alice, bob, charlie):
    """Raw group document with three members, Alice owning it."""
    now = datetime.now(timezone.utc)
    return {
        "_id": ObjectId(),
        "name": "Lisbon trip",
        "description": None,
        "category": "trip",
        "owner_id": alice,
        "default_currency": {"code": "EUR", "symbol": "€"},
        "members": [
            {"user_id": alice, "role": "owner", "joined_at": now},
            {"user_id": bob, "role": "member", "joined_at": now},
            {"user_id": charlie, "role": "member", "joined_at": now},
        ],
        "created_at": now,
        "updated_at": now,
    }

