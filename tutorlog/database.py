"""
Student Interaction Log — Database Engine
SQLAlchemy setup for the relational backend. Works with SQLite (dev) and PostgreSQL (prod).
"""

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

from tutorlog.config import DATABASE_URL


# ─── Engine Setup ────────────────────────────────────────────────────────────

def make_engine(url: str) -> Engine:
    """Build an engine with the right pooling for the URL's dialect."""
    if url.startswith("sqlite"):
        # SQLite needs special handling for concurrent access
        sqlite_engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )

        # Enable WAL mode for better concurrent read performance
        @event.listens_for(sqlite_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

        return sqlite_engine

    # PostgreSQL — standard pooled connection
    return create_engine(
        url,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,  # Test connections before use
        echo=False,
    )


engine = make_engine(DATABASE_URL)


# ─── Session Factory ─────────────────────────────────────────────────────────

def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autocommit=False, autoflush=False)


# ─── Base Class ──────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


# ─── Schema / Liveness ───────────────────────────────────────────────────────

def init_db(bind: Engine = engine) -> None:
    """Create the interactions table and its indexes. Safe to run multiple times."""
    # Import registers the model on Base.metadata
    from tutorlog import models  # noqa: F401
    Base.metadata.create_all(bind=bind)


def check_connection(bind: Engine = engine) -> None:
    """Round-trip a trivial query. Raises SQLAlchemyError if the database is unreachable."""
    with bind.connect() as conn:
        conn.execute(text("SELECT 1"))
