# whmapping/core/db.py

import ssl
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy import event

from whmapping.core.config import (
    DATABASE_URL,
    DB_TYPE,
    DB_POOL_SIZE,
    DB_MAX_OVERFLOW,
    DB_POOL_TIMEOUT,
    DB_SSL_VERIFY,
    DB_ECHO_POOL,
    DB_LOCK_TIMEOUT_MS,
    APP_ENV,
)

Base = declarative_base()


# =====================================================
# ENGINE ARGS PER BACKEND
# =====================================================
def _postgres_engine_args() -> dict:
    ssl_ctx = ssl.create_default_context()
    if not DB_SSL_VERIFY:
        ssl_ctx.check_hostname = False
        ssl_ctx.verify_mode = ssl.CERT_NONE

    return {
        "connect_args": {
            "ssl": ssl_ctx,
            # pgbouncer in transaction mode cannot hold prepared statements
            "statement_cache_size": 0,
            "prepared_statement_cache_size": 0,
            # a ledger write waiting on a locked balance row gives up here
            "server_settings": {"lock_timeout": str(DB_LOCK_TIMEOUT_MS)},
        },
        "isolation_level": "READ COMMITTED",
        "pool_size": DB_POOL_SIZE,
        "max_overflow": DB_MAX_OVERFLOW,
        "pool_timeout": DB_POOL_TIMEOUT,
        "pool_pre_ping": True,
    }


def _sqlite_engine_args() -> dict:
    return {"connect_args": {"check_same_thread": False}}


engine = create_async_engine(
    DATABASE_URL,
    echo=False,
    echo_pool=DB_ECHO_POOL,
    future=True,
    **(_postgres_engine_args() if DB_TYPE == "postgres" else _sqlite_engine_args()),
)


def configure_sqlite_connection(dbapi_connection, _):
    """SQLite leaves FK checks off and fails lock contention immediately by default."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute(f"PRAGMA busy_timeout={int(DB_LOCK_TIMEOUT_MS)}")
    cursor.close()


if DB_TYPE == "sqlite":
    event.listen(engine.sync_engine, "connect", configure_sqlite_connection)


# =====================================================
# SESSIONS
# =====================================================
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Session for scripts; anything left uncommitted is rolled back on exit."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.rollback()


import whmapping.models  # noqa


# =====================================================
# DEV ONLY: AUTO CREATE TABLES
# =====================================================
async def init_models():
    if APP_ENV != "development":
        raise RuntimeError("init_models() is forbidden outside development")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
