import asyncio
import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Config is read at import time.
os.environ["APP_ENV"] = "development"
os.environ["DB_TYPE"] = "sqlite"
os.environ.setdefault(
    "SQLITE_PATH", os.path.join(tempfile.mkdtemp(prefix="whmapping-"), "app.db")
)
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret")

from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from whmapping.core.db import Base, configure_sqlite_connection, get_db  # noqa: E402
from whmapping.core.security import create_access_token  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    # NullPool: every asyncio.run() gets a fresh connection on its own loop
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )
    event.listen(engine.sync_engine, "connect", configure_sqlite_connection)

    async def create_all():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_all())
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
def run_db(session_factory):
    """Run ``fn(session, *args, **kwargs)`` in a fresh session and return its result."""

    def run(fn, *args, **kwargs):
        async def go():
            async with session_factory() as session:
                return await fn(session, *args, **kwargs)

        return asyncio.run(go())

    return run


@pytest.fixture
def client(session_factory):
    from main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    # not used as a context manager so the lifespan never touches SQLITE_PATH
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(sub: str = "u-1", name: str | None = "Alice", role: str = "user") -> dict:
    token = create_access_token(sub, name=name, role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    return auth_headers()


@pytest.fixture
def admin_headers():
    return auth_headers(sub="admin-1", name="Admin", role="admin")


@pytest.fixture
def other_headers():
    return auth_headers(sub="u-2", name="Bob")
