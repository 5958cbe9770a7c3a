import pytest

from screentime_api import create_app
from screentime_api.fixtures import load_mock_data
from screentime_api.services import ExtensionWorkflow, GroupTracker, NotificationsTracker
from screentime_api.store import MemoryStore


@pytest.fixture
def store():
    store = MemoryStore()
    load_mock_data(store)
    return store


@pytest.fixture
def notifications(store):
    return NotificationsTracker(store)


@pytest.fixture
def groups(store, notifications):
    return GroupTracker(store, notifications)


@pytest.fixture
def workflow(store, groups, notifications):
    return ExtensionWorkflow(store, groups, notifications, approval_threshold=0.5)


@pytest.fixture
def app():
    app = create_app('screentime_api.config.TestConfig')
    load_mock_data(app.db)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer test-token"}
