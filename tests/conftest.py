import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import create_engine, create_session_factory, init_db
from main import create_app
from notifier import Notifier
from store import BookingStore


class RecordingNotifier(Notifier):
    """Notifier that keeps sent mails in memory instead of talking SMTP."""

    def __init__(self):
        super().__init__()
        self.enabled = True
        self.sent = []

    def send(self, to, subject, body):
        self.sent.append({"to": to, "subject": subject, "body": body})


@pytest.fixture
def settings(tmp_path):
    return Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.sqlite'}")


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
async def session(settings):
    engine = create_engine(settings)
    await init_db(engine)
    async_session = create_session_factory(engine)
    async with async_session() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def store(session):
    return BookingStore(session)


@pytest.fixture
def client(settings, notifier):
    app = create_app(settings=settings, notifier=notifier)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def anna():
    return {
        "firstName": "Anna",
        "lastName": "Svensson",
        "email": "anna@example.com",
        "personnummer": "1234",
        "destination": "Paris",
        "date": "2026-06-01",
        "people": 2,
    }
