"""Database engine lifecycle and per-request session management."""

import logging
from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from panelauth.core.config import Settings

logger = logging.getLogger(__name__)


class Database:
    """
    Owns the engine and session factory for one process.

    Built once at startup from settings, stored on app.state and disposed on
    shutdown. Request handlers reach it through the get_db dependency.
    """

    def __init__(self, url: str, *, echo: bool = False, pool_timeout: float = 5.0):
        self.url = url
        self.engine = self._create_engine(url, echo=echo, pool_timeout=pool_timeout)
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            echo=settings.DEBUG,
            pool_timeout=settings.DB_POOL_TIMEOUT_SEC,
        )

    @staticmethod
    def _create_engine(url: str, *, echo: bool, pool_timeout: float) -> Engine:
        if url.startswith("sqlite"):
            # One shared connection so in-memory databases survive across sessions.
            return create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            pool_timeout=pool_timeout,
            connect_args={"connect_timeout": max(1, int(pool_timeout))},
        )

    def session(self) -> Session:
        return self.session_factory()

    def check_connected(self) -> bool:
        """Run a trivial query to verify the database is reachable."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Database health check failed: %s", type(e).__name__)
            return False

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")


def get_database(request: Request) -> Database:
    """Dependency that returns the process-wide Database from app.state."""
    return request.app.state.db


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
