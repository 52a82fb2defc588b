"""
Database Session Management

Engine setup and unit-of-work sessions for the key-value table.
"""

from contextlib import contextmanager
from typing import Generator
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool

from .models import Base

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///cognitive_os.db"


def _engine_options(database_url: str, pool_size: int, max_overflow: int) -> dict:
    if database_url.startswith("sqlite"):
        # The debounced snapshot writes from a timer thread
        return {"connect_args": {"check_same_thread": False}}
    return {
        "poolclass": QueuePool,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


class DatabaseSession:
    """
    Owns the SQLAlchemy engine for one database.

    SqlStore opens a short session per operation through get_session().
    """

    def __init__(
        self,
        database_url: str = DEFAULT_DATABASE_URL,
        pool_size: int = 5,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        self.database_url = database_url
        self.engine = create_engine(
            database_url,
            echo=echo,
            **_engine_options(database_url, pool_size, max_overflow),
        )
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

    def create_tables(self):
        Base.metadata.create_all(self.engine)

    def drop_tables(self):
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Session committed on success and rolled back on error.

        Usage:
            with db.get_session() as session:
                session.get(KeyValueRecord, key)
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def healthcheck(self) -> bool:
        """True when a trivial query succeeds."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Database healthcheck failed: %s", e)
            return False

    def dispose(self):
        self.engine.dispose()


def init_db(database_url: str = DEFAULT_DATABASE_URL, **kwargs) -> DatabaseSession:
    """Connect to a database and make sure the tables exist."""
    db = DatabaseSession(database_url, **kwargs)
    db.create_tables()
    return db
