import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.database import Database
from app.core.migrations import Migrator
from app.main import create_app


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_PATH=str(tmp_path / "finance.db"),
        LOG_DIR="",
        ENVIRONMENT="test",
        RATE_LIMIT_MAX_REQUESTS=1000,
        BACKUP_TOKEN=None,
    )


@pytest.fixture
async def database(settings):
    db = Database(settings.database_file)
    yield db
    await db.dispose()


@pytest.fixture
async def migrated_database(database):
    await Migrator(database).run()
    return database


@pytest.fixture
async def session(migrated_database):
    async with migrated_database.session_factory() as db_session:
        yield db_session


@pytest.fixture
def make_client(settings):
    """Build a TestClient with optional settings overrides; lifespan (migrations) runs on enter."""
    clients = []

    def _make(raise_server_exceptions: bool = True, **overrides) -> TestClient:
        app = create_app(settings.model_copy(update=overrides))
        test_client = TestClient(app, raise_server_exceptions=raise_server_exceptions)
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        test_client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
