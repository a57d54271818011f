"""Database connection and session management."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from userhub.core.config import settings


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def _engine_kwargs(url: str) -> dict[str, Any]:
    """
    Engine options per backend.

    An in-memory SQLite database exists only on one connection, so it gets a
    single shared connection (StaticPool). That is for tests only: sessions
    sharing it also share transactions. File-based SQLite keeps a normal
    pool with one connection per session.
    """
    if _is_memory_sqlite(url):
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    if url.startswith("sqlite://"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **_engine_kwargs(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
