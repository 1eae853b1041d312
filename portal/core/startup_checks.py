from __future__ import annotations

import logging
import time
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from portal.core.config import (
    DATABASE_URL,
    DB_CONNECT_RETRIES,
    DB_CONNECT_RETRY_DELAY_SECONDS,
    IS_PROD,
    IS_TEST,
)
from portal.core.database import Base

logger = logging.getLogger(__name__)
MIGRATIONS_PREFIX = "[MIGRATIONS]"
DATABASE_PREFIX = "[DATABASE]"


def validate_database_environment() -> None:
    if IS_PROD and DATABASE_URL.startswith("sqlite"):
        logger.critical("%s SQLite is forbidden in production", MIGRATIONS_PREFIX)
        raise RuntimeError("SQLite is forbidden in production environment")


def wait_for_database(
    engine: Engine,
    *,
    retries: int = DB_CONNECT_RETRIES,
    delay_seconds: float = DB_CONNECT_RETRY_DELAY_SECONDS,
) -> None:
    attempt = 0
    while True:
        attempt += 1
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except OperationalError:
            if attempt > retries:
                logger.critical("%s unreachable after %s attempts", DATABASE_PREFIX, attempt)
                raise
            logger.warning(
                "%s connection failed attempt=%s retrying_in=%ss",
                DATABASE_PREFIX,
                attempt,
                delay_seconds,
            )
            time.sleep(delay_seconds)
            continue
        logger.info("%s connection established attempt=%s", DATABASE_PREFIX, attempt)
        return


def ensure_migrations_applied(*, engine: Engine, alembic_config_path: Path) -> None:
    if IS_TEST:
        logger.info("%s skipped migration check in test environment", MIGRATIONS_PREFIX)
        return

    if not alembic_config_path.exists():
        logger.critical("%s alembic config not found path=%s", MIGRATIONS_PREFIX, alembic_config_path)
        raise RuntimeError("alembic config not found")

    alembic_cfg = Config(str(alembic_config_path))
    script_directory = ScriptDirectory.from_config(alembic_cfg)
    expected_heads = set(script_directory.get_heads())

    with engine.connect() as connection:
        inspector = inspect(connection)
        if "alembic_version" not in inspector.get_table_names():
            logger.critical("%s alembic_version table missing", MIGRATIONS_PREFIX)
            raise RuntimeError("Database has no migration state")

        current_rows = connection.exec_driver_sql("SELECT version_num FROM alembic_version").fetchall()

    current_heads = {row[0] for row in current_rows if row and row[0]}
    if current_heads != expected_heads:
        logger.critical(
            "%s pending migration detected current=%s expected=%s",
            MIGRATIONS_PREFIX,
            sorted(current_heads),
            sorted(expected_heads),
        )
        raise RuntimeError("Pending migrations detected")

    logger.info("%s migration state verified", MIGRATIONS_PREFIX)


def initialize_database(*, engine: Engine, alembic_config_path: Path) -> None:
    """Prepare the schema once per process.

    SQLite development databases are created from the models; every other
    backend is expected to be migrated by Alembic beforehand.
    """
    validate_database_environment()
    wait_for_database(engine)
    if engine.url.get_backend_name() == "sqlite":
        import portal.models  # noqa: F401

        Base.metadata.create_all(bind=engine)
        logger.info("%s sqlite schema synchronized", DATABASE_PREFIX)
        return
    ensure_migrations_applied(engine=engine, alembic_config_path=alembic_config_path)
