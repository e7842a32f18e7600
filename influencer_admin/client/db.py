from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from influencer_admin.client.models import Base
from influencer_admin.config import settings


def _engine_connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


def create_session_factory(url: str | None = None) -> sessionmaker:
    """Build a session factory for the product cache database, creating its tables."""
    db_url = url or settings.PRODUCT_CACHE_DB_URL
    engine: Engine = create_engine(db_url, future=True, connect_args=_engine_connect_args(db_url))
    init_db(engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
