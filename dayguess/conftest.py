# dayguess/conftest.py
import os

import pytest

os.environ.setdefault("ENV", "test")

from dayguess.core.storage import InMemoryStorage
from dayguess.tests.mocks import make_entry


@pytest.fixture
def storage():
    """Fresh in-memory storage per test."""
    return InMemoryStorage()


@pytest.fixture
def small_pool():
    """
    Sixty entries: two real days on 03-08, one on 12-25, the rest invented.
    """
    entries = [
        make_entry("womens-day", real=True, date="03-08", name="International Women's Day"),
        make_entry("second-03-08", real=True, date="03-08"),
        make_entry("christmas-ish", real=True, date="12-25"),
    ]
    entries.extend(make_entry(f"fake-{i:02d}") for i in range(57))
    return tuple(entries)


@pytest.fixture
def client(storage, small_pool):
    """TestClient over an app with isolated storage and the small pool."""
    from fastapi.testclient import TestClient

    from dayguess.main import create_app

    app = create_app(storage=storage, pool=small_pool)
    with TestClient(app) as test_client:
        yield test_client
