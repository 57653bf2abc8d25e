from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from seocrawl import config
from seocrawl.db.models import Base

# Simple cache to avoid creating multiple Engine objects in the same process.
_ENGINE: Optional[Engine] = None


def make_engine(database_url: Optional[str] = None) -> Engine:
    """Create or return a cached SQLAlchemy Engine for `database_url`.

    Caches a single Engine instance per process to avoid the cost of
    creating many engines when repository instances are created.
    In-memory SQLite URLs share one connection so every session sees the
    same database.
    """
    global _ENGINE
    database_url = database_url or config.DATABASE_URL
    if not database_url:
        raise RuntimeError("DATABASE_URL not set")
    if _ENGINE is None:
        if database_url.startswith("sqlite") and ":memory:" in database_url:
            _ENGINE = create_engine(
                database_url,
                future=True,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            _ENGINE = create_engine(database_url, future=True, pool_pre_ping=True)
    return _ENGINE


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(engine)
