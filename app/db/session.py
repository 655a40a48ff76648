# app/db/session.py

from typing import Any, Dict, Generator
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from app.core.config import settings


def build_engine(database_url: str, **kwargs: Any) -> Engine:
    """SQLite needs cross-thread access because FastAPI runs sync routes in a pool."""
    connect_args: Dict[str, Any] = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(database_url, connect_args=connect_args, **kwargs)


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = build_session_factory(engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
