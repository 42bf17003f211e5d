# fitflow/database.py
"""
Storage handle for the FitFlow platform.

The engine and session factory live on an explicitly constructed
``Database`` object. The application opens one at startup, keeps it on
``app.state.database`` and disposes it at shutdown; nothing here is a
module-level connection singleton.
"""

from contextlib import contextmanager
from datetime import datetime
import logging
from typing import Any, Generator, Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool

from .core.config import Settings

logger = logging.getLogger(__name__)

Base: DeclarativeMeta = declarative_base()

SQLITE_BUSY_TIMEOUT_SECONDS = 30


class Database:
    """Owns the SQLAlchemy engine and hands out sessions."""

    def __init__(self, url: str, *, echo: bool = False, **engine_kwargs: Any) -> None:
        self.url = url
        self.is_sqlite = url.startswith("sqlite")
        if self.is_sqlite:
            connect_args = engine_kwargs.pop("connect_args", {})
            connect_args.setdefault("check_same_thread", False)
            connect_args.setdefault("timeout", SQLITE_BUSY_TIMEOUT_SECONDS)
            self.engine: Engine = create_engine(
                url, echo=echo, connect_args=connect_args, **engine_kwargs
            )
            event.listen(self.engine, "connect", _configure_sqlite_connection)
            event.listen(self.engine, "begin", _begin_sqlite_immediate)
        else:
            engine_kwargs.setdefault("poolclass", QueuePool)
            engine_kwargs.setdefault("pool_pre_ping", True)
            engine_kwargs.setdefault("pool_recycle", 3600)
            self.engine = create_engine(url, echo=echo, **engine_kwargs)

        event.listen(self.engine, "connect", _receive_connect)
        event.listen(self.engine, "checkout", _receive_checkout)
        event.listen(self.engine, "checkin", _receive_checkin)

        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        if settings.is_sqlite:
            return cls(settings.database_url, echo=settings.database_echo)
        return cls(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_timeout=30,
        )

    def create_all(self) -> None:
        """Create every table registered on ``Base``."""
        from . import models  # noqa: F401  (registers mappers)

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Session that commits on success and rolls back on error."""
        db = self.session()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.error("Database ping failed: %s", exc)
            return False

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")


def _configure_sqlite_connection(dbapi_connection: Any, connection_record: Any) -> None:
    # Hand transaction control to SQLAlchemy so BEGIN is emitted by _begin_sqlite_immediate
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_SECONDS * 1000}")
        cursor.execute("PRAGMA journal_mode=WAL")
    finally:
        cursor.close()


def _begin_sqlite_immediate(conn: Any) -> None:
    # Take the write lock up front; a deferred read-then-write can fail with SQLITE_BUSY
    conn.exec_driver_sql("BEGIN IMMEDIATE")


# Log pool events for monitoring
def _receive_connect(dbapi_connection: Any, connection_record: Any) -> None:
    connection_record.info["connect_time"] = datetime.now()
    logger.debug("Database connection established")


def _receive_checkout(dbapi_connection: Any, connection_record: Any, connection_proxy: Any) -> None:
    logger.debug("Connection checked out from pool")


def _receive_checkin(dbapi_connection: Any, connection_record: Any) -> None:
    logger.debug("Connection returned to pool")


def get_db(request: Request) -> Generator[Session, None, None]:
    """Get database session with proper cleanup."""
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
