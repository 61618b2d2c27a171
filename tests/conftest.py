"""
Shared pytest fixtures for uifilter tests.
"""

import logging
import tempfile
from pathlib import Path

import pytest
import pytest_asyncio

from uifilter import FieldValueCategory, MappingFieldResolver, PredicateCompiler
from uifilter.db import aconnect

logging.basicConfig(level=logging.CRITICAL)


HEROES = [
    # id, name, alter_ego, power, state, age, rating, role
    (1, "Bolt", "Barry", "Lightning bolt", "Massachusetts", 34, 4.5, "hero"),
    (2, "Shade", "Sara", "Shadow walk", "Connecticut", 28, 3.0, "villain"),
    (3, "Gale", "Gus", "Wind", "Rhode Island", 41, 4.0, "hero"),
    (4, "Anvil", "Ann", "Strength", "Maine", 19, 2.5, "sidekick"),
    (5, "Crank", "Carl", "Gadgets", "Massachusetts", 52, 3.5, "villain"),
    (6, "Jim", "James Morrison", "Bolt throwing", "Vermont", 23, 5.0, "hero"),
]


@pytest.fixture
def resolver():
    """Resolver for the heroes table."""
    return MappingFieldResolver({
        "id": FieldValueCategory.ORDERED,
        "name": FieldValueCategory.TEXT,
        "alter_ego": FieldValueCategory.TEXT,
        "power": FieldValueCategory.TEXT,
        "state": FieldValueCategory.TEXT,
        "age": FieldValueCategory.ORDERED,
        "rating": FieldValueCategory.ORDERED,
        "role": FieldValueCategory.OPAQUE,
    })


@pytest.fixture
def compiler():
    return PredicateCompiler()


@pytest_asyncio.fixture
async def heroes_db():
    """Provide the path of a SQLite database holding the heroes table."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = str(Path(tmpdir) / "heroes.db")
        async with aconnect(db_path, writer=True) as conn:
            await conn.execute("""
                CREATE TABLE heroes (
                    id INTEGER PRIMARY KEY,
                    name TEXT NOT NULL,
                    alter_ego VARCHAR(64),
                    power TEXT,
                    state TEXT,
                    age INTEGER,
                    rating REAL,
                    role BLOB
                )
            """)
            await conn.executemany(
                "INSERT INTO heroes VALUES (?, ?, ?, ?, ?, ?, ?, ?)", HEROES
            )
        yield db_path
