"""Engine and session plumbing for the local Pokemon store."""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .schema import create_all

MEMORY_PATH = ":memory:"


def sqlite_url(sqlite_path: str) -> str:
    """
    SQLAlchemy URL for a store path.

    ":memory:" gives a private in-memory database. Any other path is a file;
    its parent directory is created so a fresh checkout can run `doctor`.
    """
    if sqlite_path == MEMORY_PATH:
        return "sqlite://"
    Path(sqlite_path).parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{sqlite_path}"


def get_engine(sqlite_path: str, create_schema: bool = True) -> Engine:
    if sqlite_path == MEMORY_PATH:
        # One shared connection, otherwise every checkout sees an empty database.
        engine = create_engine(
            sqlite_url(sqlite_path),
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(sqlite_url(sqlite_path), future=True)
    if create_schema:
        create_all(engine)
    return engine


def get_session(sqlite_path: str) -> Session:
    """Get a SQLAlchemy session (caller must close it)."""
    engine = get_engine(sqlite_path)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)()


@contextmanager
def session_context(sqlite_path: str) -> Generator[Session, None, None]:
    """
    Session scope for one CLI command or seeding run.

    Query modules only read, so nothing is committed here; pokemon_repo
    callers commit explicitly. On error the session is rolled back and the
    exception propagates.

    Usage:
        with session_context(sqlite_path) as session:
            service = DatabaseService(session)
    """
    session = get_session(sqlite_path)
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
