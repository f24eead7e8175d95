"""Database engine and session factory for the blob store"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from debt_tracker.config import settings
from debt_tracker.infrastructure.database.models import Base


def build_engine(database_url: str | None = None) -> Engine:
    """Create an engine; SQLite connections may be shared with the event loop thread"""
    url = database_url or settings.database_url
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(
        url,
        pool_pre_ping=True,  # Verify connections before using
        connect_args=connect_args,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    """Create the blob table if needed and return a session factory bound to it"""
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
