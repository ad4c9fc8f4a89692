import os
import sys
import pytest

# Ensure the backend root (containing the `imposter` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from imposter import create_app, socketio
from imposter.catalog import CategoryCatalog
from imposter.services.rooms.service import RoomService


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    CORS_ORIGINS = []
    # Short grace period so expiry tests finish quickly
    RECONNECT_GRACE_SEC = 0.3


class FakeTransport:
    def __init__(self):
        self.broadcasts = []
        self.left = []

    def broadcast(self, event, data, room):
        self.broadcasts.append((event, data, room))

    def leave(self, sid, room):
        self.left.append((sid, room))


class ManualScheduler:
    """Collects timer tasks instead of running them; tests fire them by hand."""

    def __init__(self):
        self.tasks = []

    def start_task(self, fn, *args):
        self.tasks.append((fn, args))

    def sleep(self, seconds):
        pass

    def run_all(self):
        tasks, self.tasks = self.tasks, []
        for fn, args in tasks:
            fn(*args)


class FixedRandom:
    """randrange() always returns ``index`` (clamped to the range)."""

    def __init__(self, index=0):
        self.index = index

    def randrange(self, n):
        return min(self.index, n - 1)

    def choice(self, seq):
        return seq[self.randrange(len(seq))]


@pytest.fixture()
def transport():
    return FakeTransport()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def catalog():
    return CategoryCatalog({'Sports': ['Soccer', 'Tennis'], 'Movies': ['Dune']})


@pytest.fixture()
def service(transport, scheduler, catalog):
    return RoomService(
        catalog=catalog,
        transport=transport,
        rng=FixedRandom(0),
        start_task=scheduler.start_task,
        sleep=scheduler.sleep,
    )


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
    application.extensions['imposter'].shutdown()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        if test_client.is_connected():
            test_client.disconnect()
