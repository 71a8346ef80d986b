from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from auth.config import settings


class Base(DeclarativeBase):
    pass


def _connect_args(database_url: str) -> dict:
    if database_url.startswith("postgresql"):
        return {
            "connect_timeout": settings.db_connect_timeout_sec,
            "options": f"-c statement_timeout={settings.db_statement_timeout_ms}",
        }
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False, "timeout": settings.db_connect_timeout_sec}
    return {}


engine = create_engine(
    settings.database_url,
    future=True,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.database_url),
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, class_=Session)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
