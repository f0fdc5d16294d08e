"""Database connection, session management and key-value helpers."""

from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from ..paths import APP_DATA_DIR
from .models import Base, KeyValue

# ── paths ────────────────────────────────────────────────────────────────────

DB_PATH = APP_DATA_DIR / "multitimer.db"

# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _get_engine():
    global _engine
    if _engine is None:
        APP_DATA_DIR.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{DB_PATH}",
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Override the database connection URL.  Used by tests to point at
    an in-memory SQLite database instead of the real one on disk."""
    global _engine, _SessionFactory
    _SessionFactory = None
    _engine = create_engine(
        url,
        connect_args={"check_same_thread": False},
        echo=False,
    )


def init_db() -> None:
    """Create all tables."""
    Base.metadata.create_all(_get_engine())


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_item(key: str) -> str | None:
    """Return the blob stored under *key*, or None when absent."""
    with get_session() as db:
        row = db.get(KeyValue, key)
        return row.value if row is not None else None


def set_item(key: str, value: str) -> None:
    """Store *value* under *key*, replacing whatever was there."""
    with get_session() as db:
        row = db.get(KeyValue, key)
        if row is None:
            db.add(KeyValue(key=key, value=value))
        else:
            row.value = value
