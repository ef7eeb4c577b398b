"""Database engine and session management."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator
from urllib.parse import urlparse

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from roles_permissions.core.config import AppSettings, get_settings


def _ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""

    parsed = urlparse(database_url)
    if parsed.scheme != "sqlite" or parsed.path in ("", ":memory:", "/:memory:"):
        return

    # sqlite:///./data/rps.db parses to the path "/./data/rps.db"
    raw_path = parsed.path[1:] if parsed.path.startswith("/./") else parsed.path
    Path(raw_path).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)


def build_engine(settings: AppSettings) -> Engine:
    url = settings.database_url
    engine_kwargs: Dict[str, Any] = {"future": True, "echo": settings.sql_echo}

    if url.startswith("sqlite"):
        _ensure_sqlite_directory(url)
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        # A single shared connection keeps an in-memory database alive across sessions.
        if url.endswith(":memory:") or url == "sqlite://":
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_pre_ping"] = True

    return create_engine(url, **engine_kwargs)


engine: Engine = build_engine(get_settings())

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True,
    class_=Session,
)


def create_schema() -> None:
    """Create all tables directly, for local and test runs without migrations."""

    from roles_permissions.models import Base

    Base.metadata.create_all(bind=engine)


def get_session() -> Iterator[Session]:
    """FastAPI dependency yielding a request-scoped transactional session."""

    session: Session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Provide a transactional scope for scripts and startup hooks."""

    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
