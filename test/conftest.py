"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application module reads Settings
- A fresh sqlite database per test (aiosqlite), tables created from the ORM models
- A frozen clock that tests advance explicitly
- A TestClient whose container points at the per-test database and clock

Architecture:
- Unit tests (test/**/unit/): no database, collaborators are AsyncMock/Mock
- Integration tests: real SqlAlchemyUnitOfWork over a sqlite file
- API tests: FastAPI TestClient over the same wiring as production
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings is instantiated at import time of src.platform.config.core_setting
# =============================================================================
import os
from pathlib import Path
import tempfile


def _early_setup_test_environment() -> None:
    bootstrap_dir = Path(tempfile.mkdtemp(prefix='inventory_test_'))
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{bootstrap_dir / "bootstrap.db"}'
    os.environ['HOLD_SWEEP_INTERVAL_SECONDS'] = '0'
    os.environ['DB_AUTO_CREATE'] = 'true'

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


_early_setup_test_environment()

from collections.abc import AsyncGenerator, Callable, Generator  # noqa: E402
from datetime import datetime, timezone  # noqa: E402

from dependency_injector import providers  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402

from src.platform.config.di import container  # noqa: E402
from src.platform.database.orm_db_setting import Database  # noqa: E402
from src.platform.database.unit_of_work import (  # noqa: E402
    SqlAlchemyUnitOfWork,
    UnitOfWorkFactory,
)
from test.fake_clock import FakeClock  # noqa: E402


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 6, 1, 18, 0, tzinfo=timezone.utc))


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    db = Database(url=f'sqlite+aiosqlite:///{tmp_path / "inventory.db"}')
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def uow_factory(database: Database) -> UnitOfWorkFactory:
    return lambda: SqlAlchemyUnitOfWork(session_factory=database.session)


@pytest.fixture
def client(tmp_path: Path, clock: FakeClock) -> Generator[TestClient, None, None]:
    """
    The test app creates tables and disposes the engine inside its own event
    loop, so the Database is only constructed here and never used from pytest's loop.
    """
    from test.test_main import app

    container.database.override(
        providers.Singleton(Database, url=f'sqlite+aiosqlite:///{tmp_path / "api.db"}')
    )
    container.clock.override(providers.Object(clock))
    container.reset_singletons()

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    container.database.reset_override()
    container.clock.reset_override()
    container.reset_singletons()


@pytest.fixture
def actor() -> Callable[..., dict[str, str]]:
    def _actor(kind: str = 'buyer_session', id: str = 'sess_1') -> dict[str, str]:
        return {'kind': kind, 'id': id}

    return _actor
