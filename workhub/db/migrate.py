"""
Alembic migration runner, used at startup when RUN_MIGRATIONS=1.
"""
import logging
import os
from typing import Optional
from alembic.config import Config
from alembic import command
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

# Arbitrary key for pg_advisory_lock; shared by every API worker
ADVISORY_LOCK_ID = 715302611

ALEMBIC_INI = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "alembic.ini")


def _alembic_config(database_url: str) -> Config:
    alembic_cfg = Config(ALEMBIC_INI)
    alembic_cfg.attributes["database_url"] = database_url
    alembic_cfg.attributes["configure_logger"] = False
    return alembic_cfg


def _acquire_migration_lock(engine: Engine) -> Optional[Connection]:
    """
    Take the PostgreSQL advisory lock. The returned connection holds it.

    Returns None when the lock could not be taken; migrations still run
    since Alembic upgrades are idempotent.
    """
    conn = engine.connect()
    try:
        conn.execute(text(f"SELECT pg_advisory_lock({ADVISORY_LOCK_ID})"))
        conn.commit()
        logger.info("Migration lock acquired")
        return conn
    except Exception as lock_error:
        logger.warning(f"Could not acquire advisory lock: {lock_error}")
        conn.close()
        return None


def _release_migration_lock(conn: Connection) -> None:
    try:
        conn.execute(text(f"SELECT pg_advisory_unlock({ADVISORY_LOCK_ID})"))
        conn.commit()
    except Exception as unlock_error:
        logger.warning(f"Could not release advisory lock: {unlock_error}")
    finally:
        conn.close()


def run_migrations(database_url: Optional[str] = None):
    """
    Upgrade the database to the head revision.

    On PostgreSQL concurrent workers serialize on an advisory lock so only
    one of them applies a given revision.
    """
    from workhub.core import config as app_config

    database_url = database_url or app_config.DATABASE_URL
    if not database_url:
        raise ValueError("DATABASE_URL is not set")

    logger.info("RUN_MIGRATIONS=1 -> running alembic upgrade head")

    engine = create_engine(database_url, pool_pre_ping=True)
    lock_conn = None

    try:
        if database_url.startswith("postgresql"):
            lock_conn = _acquire_migration_lock(engine)

        command.upgrade(_alembic_config(database_url), "head")
        logger.info("Migrations complete")
    except Exception:
        logger.exception("Migration failed")
        raise
    finally:
        if lock_conn is not None:
            _release_migration_lock(lock_conn)
        engine.dispose()
