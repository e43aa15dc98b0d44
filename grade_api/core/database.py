import logging
from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from grade_api.core.logging import mask_url
from grade_api.models.base import Base

logger = logging.getLogger(__name__)


class Database:
    """Engine and session factory for one database, created once per app."""

    def __init__(self, url: str, connect_timeout: int = 30):
        self.url = url
        engine_kwargs: dict = {"pool_pre_ping": True}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # one shared connection, otherwise every session sees an empty db
                engine_kwargs["poolclass"] = StaticPool
        elif url.startswith("postgresql"):
            engine_kwargs["connect_args"] = {"connect_timeout": connect_timeout}
        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    def init(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError:
            logger.exception("Database connection error (%s)", mask_url(self.url))
            return
        logger.info("Database connected successfully")

    def dispose(self) -> None:
        self.engine.dispose()

    def is_connected(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            return False
        return True

    def session(self) -> Session:
        return self.SessionLocal()


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


def get_database(request: Request) -> Database:
    return request.app.state.database
