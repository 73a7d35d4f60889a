"""
Shared fixtures for the test suite.

The tracking tables live in a shared in-memory SQLite database that is dropped
and recreated before every test, and the unified recipe cache is emptied so
results from one test never leak into the next.
"""

import os

# Must be set before api.main is imported (it initializes the database on import)
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.pop("SPOONACULAR_API_KEY", None)

import pytest

from recipehub.db import configure_engine, reset_db
from recipehub.utils.cache import clear_cache


@pytest.fixture(autouse=True)
def fresh_state():
    configure_engine("sqlite://")
    reset_db()
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def user_id():
    return "user-123"
