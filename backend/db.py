import os
import logging
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from base import Base

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///products.db"


def database_url_from_env() -> str:
    """
    Returns the configured DATABASE_URL, falling back to the local SQLite file.
    """
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


def make_engine(database_url: str):
    """
    Builds a pooled SQLAlchemy engine for the given URL.

    SQLite connections are shared across request threads, so the same-thread
    check is disabled. In-memory SQLite databases only exist for the lifetime of
    one connection, hence the StaticPool.

    Args:
        database_url: Any SQLAlchemy database URL.

    Returns:
        A configured Engine instance.
    """
    url = make_url(database_url)
    kwargs = {}
    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    logger.info(f"Creating database engine for {url.render_as_string(hide_password=True)}")
    return create_engine(url, **kwargs)


def make_session_factory(engine):
    # Rows handed back by the store stay readable after their session closes.
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine) -> None:
    """
    Creates all defined tables on the given engine if they do not exist yet.
    """
    import schema
    Base.metadata.create_all(bind=engine)


def clear_database(engine) -> None:
    """
    Drops every table and recreates the schema, discarding all products.
    """
    import schema
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    init_db(make_engine(database_url_from_env()))
