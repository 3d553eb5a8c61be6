import pytest
from fastapi.testclient import TestClient

from tabletrek.core.config import Settings
from tabletrek.db.base import Base
from tabletrek.db.session import create_engine, create_session_factory
from tabletrek.main import create_app
from tabletrek.services.accounts import create_user
from tabletrek.services.achievements import evaluate_achievements
from tabletrek.services.seeding import seed_achievements


@pytest.fixture
def settings(tmp_path):
    return Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'tabletrek-test.db'}", log_level="WARNING")


@pytest.fixture
async def session_factory(settings):
    engine = create_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
async def user(session_factory):
    return await create_user(session_factory, "alice", "correct-horse")


@pytest.fixture
def seed(session_factory):
    """Seed a small catalog: seed(("Name", "desc", "icon", reward, requirement, category), ...)."""

    async def _seed(*entries):
        await seed_achievements(session_factory, list(entries))

    return _seed


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def signup(client):
    def _signup(username="alice", password="correct-horse"):
        resp = client.post("/api/auth/signup", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.text
        return resp.json()

    return _signup


@pytest.fixture
def evaluate(session_factory, settings):
    """evaluate_achievements bound to the test database and the configured window."""

    async def _evaluate(user_id, profile, window=None):
        if window is None:
            window = settings.recent_session_window
        return await evaluate_achievements(session_factory, user_id, profile, window)

    return _evaluate
