"""
Database configuration and connection management.

Builds SQLAlchemy engines and session factories for the WordPress
database used by DatabaseContentHost.
"""

import logging
import time
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings
from .models import Base

logger = logging.getLogger(__name__)

QUERY_LOGGING_THRESHOLD_MS = 100


def get_connect_args(db_url: str) -> dict:
    """
    Get database-specific connection arguments.

    Args:
        db_url: Database connection URL

    Returns:
        Connection arguments dict
    """
    if "sqlite" in db_url:
        return {"check_same_thread": False}
    return {}


def _sanitize_url(db_url: str) -> str:
    return make_url(db_url).render_as_string(hide_password=True)


def create_db_engine(db_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create an engine for the WordPress database.

    In-memory SQLite URLs get a StaticPool so every session sees the
    same database.

    Args:
        db_url: SQLAlchemy URL (defaults to settings.DATABASE_URL)
        echo: Echo SQL statements (defaults to settings.DB_ECHO)

    Returns:
        Configured engine
    """
    db_url = db_url or settings.DATABASE_URL
    echo = settings.DB_ECHO if echo is None else echo

    logger.info("Using database: %s", _sanitize_url(db_url))

    kwargs = {"connect_args": get_connect_args(db_url), "echo": echo}
    if db_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_engine(db_url, **kwargs)
    _install_slow_query_logging(engine)
    return engine


def _install_slow_query_logging(engine: Engine) -> None:
    @event.listens_for(engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        """Track query start time."""
        conn.info.setdefault("query_start_time", []).append(time.time())

    @event.listens_for(engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        """Log slow queries."""
        total_time_ms = (time.time() - conn.info["query_start_time"].pop()) * 1000

        if total_time_ms > QUERY_LOGGING_THRESHOLD_MS:
            logger.warning(
                "Slow query detected: %.2fms %s", total_time_ms, statement[:200]
            )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to an engine."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def create_schema(engine: Engine) -> None:
    """
    Create the WordPress tables that do not exist yet.

    Existing tables are left untouched.
    """
    Base.metadata.create_all(bind=engine)
    logger.info("WordPress schema ensured")
