import logging
import sqlite3
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

from ..config import settings

# Configure logging
logger = logging.getLogger(__name__)

# Database models base
Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Turn on foreign key enforcement for every new SQLite connection.

    SQLite ships with foreign keys disabled, which would let a role be deleted
    while users still point at it.
    """
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class DatabaseManager:
    """Lazily builds the SQLAlchemy engine and session factory."""

    def __init__(self, database_url: str | None = None):
        self.database_url = database_url or settings.database_url
        self._engine = None
        self._session_local = None

    def get_engine(self):
        """Get SQLAlchemy engine for the configured connection string"""
        if self._engine is None:
            if self.database_url.startswith("sqlite"):
                self._engine = create_engine(
                    self.database_url,
                    echo=settings.sql_echo,
                    connect_args={"check_same_thread": False},
                )
            else:
                self._engine = create_engine(
                    self.database_url,
                    poolclass=QueuePool,
                    pool_size=settings.pool_size,
                    max_overflow=settings.max_overflow,
                    pool_pre_ping=True,
                    pool_recycle=settings.pool_recycle,
                    echo=settings.sql_echo,
                )

            # Test connection
            try:
                with self._engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
                    logger.info(
                        f"Database connection established ({self._engine.url.drivername})"
                    )
            except Exception as e:
                logger.error(f"Database connection failed: {e}")
                logger.error(
                    f"Connection string (masked): {self._engine.url.render_as_string(hide_password=True)}"
                )
                raise

        return self._engine

    def get_session_local(self):
        """Get SQLAlchemy session factory"""
        if self._session_local is None:
            self._session_local = sessionmaker(
                bind=self.get_engine(),
                autoflush=False,
                expire_on_commit=False,
            )
        return self._session_local


# Database manager shared by the request dependency and init_db
db_manager = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency for database sessions"""
    SessionLocal = db_manager.get_session_local()
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def init_db(engine: Engine | None = None):
    """Create any missing tables"""
    # Register the mapped classes on Base.metadata
    from . import models  # noqa: F401

    try:
        engine = engine or db_manager.get_engine()
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise
