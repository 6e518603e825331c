import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest
from psycopg.types.json import Jsonb

from onboarding.config.settings import Settings
from onboarding.database.connection import close_pool, get_connection, init_pool

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS managers (
        id SERIAL PRIMARY KEY,
        name TEXT NOT NULL,
        phone TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS app_settings (
        key TEXT PRIMARY KEY,
        payload JSONB NOT NULL DEFAULT '{}'::jsonb,
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
)


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "onboarding_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            with conn.cursor() as cur:
                for statement in _SCHEMA:
                    cur.execute(statement)
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run integration tests")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup() -> Generator[list[tuple[str, Any]], None, None]:
    cleanup: list[tuple[str, Any]] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for table, row_id in cleanup:
                if table == "managers":
                    cur.execute("DELETE FROM managers WHERE id = %s", (row_id,))
                elif table == "app_settings":
                    cur.execute("DELETE FROM app_settings WHERE key = %s", (row_id,))
        conn.commit()


@pytest.fixture
def seed_managers(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[tuple[str, Any]],
) -> list[int]:
    ids: list[int] = []
    with db_conn.cursor() as cur:
        for name, phone in (("zz-test Carlos", "(11) 3456-7890"), ("zz-test Ana", None)):
            cur.execute(
                "INSERT INTO managers (name, phone) VALUES (%s, %s) RETURNING id",
                (name, phone),
            )
            row = cur.fetchone()
            assert row is not None
            ids.append(row[0])
    db_conn.commit()
    integration_cleanup.extend(("managers", manager_id) for manager_id in ids)
    return ids


@pytest.fixture
def clean_settings(
    db_conn: psycopg.Connection[Any],
) -> Generator[None, None, None]:
    """Hide existing app_settings rows for the test and restore them afterwards."""
    with db_conn.cursor() as cur:
        cur.execute("SELECT key, payload FROM app_settings")
        previous = cur.fetchall()
        cur.execute("DELETE FROM app_settings")
    db_conn.commit()
    try:
        yield
    finally:
        with db_conn.cursor() as cur:
            cur.execute("DELETE FROM app_settings")
            for key, payload in previous:
                cur.execute(
                    "INSERT INTO app_settings (key, payload) VALUES (%s, %s)",
                    (key, Jsonb(payload)),
                )
        db_conn.commit()


@pytest.fixture
def store_setting(
    db_conn: psycopg.Connection[Any],
    clean_settings: None,
) -> Any:
    def _store(key: str, payload: object) -> None:
        with db_conn.cursor() as cur:
            cur.execute(
                "INSERT INTO app_settings (key, payload) VALUES (%s, %s)",
                (key, Jsonb(payload)),
            )
        db_conn.commit()

    return _store
