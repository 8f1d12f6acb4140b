"""Database engine and session management"""

from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from friends_trip.config import Settings


def build_engine(app_settings: Settings) -> Engine:
    """Create the SQLAlchemy engine for the configured database"""
    connect_args = {}
    if app_settings.database_url.startswith("sqlite"):
        # Sessions are handed across FastAPI's threadpool
        connect_args["check_same_thread"] = False

    return create_engine(
        app_settings.database_url,
        connect_args=connect_args,
        pool_pre_ping=True,  # Verify connections before using
        pool_recycle=app_settings.db_pool_recycle_seconds,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency injection for database sessions, one per request"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
