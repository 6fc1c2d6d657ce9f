"""
Database Session Management

Manages SQLAlchemy sessions for PostgreSQL (SQLite is accepted for local runs
and tests).

Usage (request handlers):
    from subscription_gateway.database.session import get_db
    def endpoint(db: Session = Depends(get_db)): ...

Usage (background jobs, scripts):
    from subscription_gateway.database.session import get_session
    with get_session() as session:
        session.query(Subscription).all()
"""

from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker, DeclarativeBase
from typing import Generator

from subscription_gateway.core.config import DATABASE_URL


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}


engine = create_engine(DATABASE_URL, echo=False, **_engine_options(DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Sync context manager for background tasks and scripts."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: yields a Session committed when the request succeeds."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
