import os
import sys
import pytest

# Ensure the backend root (containing the `kartquiz` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from kartquiz import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_CREATE_TABLES = False
    CORS_ORIGINS = ['http://localhost:3000']
    SOCKETIO_NAMESPACE = '/'
    SURFACE_REJECTIONS = True
    ALLOW_ROOM_REPLACE = False
    ROOM_IDLE_TTL_SEC = 600
    ROOM_REAPER_INTERVAL_SEC = 60
    DEFAULT_HOST_NAME = 'Quiz Master'


QUESTIONS = [
    {'text': 'Where is Stockholm?', 'correctLat': 59.0, 'correctLng': 18.0, 'maxDistance': 500},
    {'text': 'Where is Paris?', 'correctLat': 48.8566, 'correctLng': 2.3522, 'maxDistance': 1000,
     'imageUrl': 'https://example.com/paris.jpg', 'timeLimit': 20},
]


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import kartquiz.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions['room_registry']


@pytest.fixture()
def make_sio_client(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        # Keep the server-side sid from the initial 'connected' packet
        connected = [pkt for pkt in test_client.get_received() if pkt['name'] == 'connected']
        test_client.server_sid = connected[0]['args'][0]['sid'] if connected else None
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def host(make_sio_client):
    return make_sio_client()


def events(test_client, name=None):
    """Received packets as (name, payload) pairs, optionally filtered by name."""
    received = [(pkt['name'], pkt['args'][0] if pkt['args'] else None) for pkt in test_client.get_received()]
    if name is None:
        return received
    return [payload for event, payload in received if event == name]
