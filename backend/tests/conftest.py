import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from base import Base
from db import make_session_factory
from services.product_store import InMemoryProductStore, SqlProductStore
from app import create_app
import schema

@pytest.fixture
def engine():
    """In-memory SQLite DB for fast testing."""
    _engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(_engine)
    yield _engine
    Base.metadata.drop_all(_engine)

@pytest.fixture
def db_session(engine):
    """Provides a raw database session for inspecting what the store wrote."""
    TestSession = sessionmaker(bind=engine)
    s = TestSession()
    try:
        yield s
    finally:
        s.close()

@pytest.fixture
def sql_store(engine):
    return SqlProductStore(make_session_factory(engine))

@pytest.fixture(params=["sql", "memory"])
def store(request, engine):
    """Every store backend, so contract tests run against both."""
    if request.param == "sql":
        return SqlProductStore(make_session_factory(engine))
    return InMemoryProductStore()

@pytest.fixture
def app(sql_store):
    """Provides a Flask app serving the SQL store over the in-memory database."""
    flask_app = create_app(store=sql_store)
    flask_app.config["TESTING"] = True
    return flask_app

@pytest.fixture
def client(app):
    """Provides a Flask test client."""
    return app.test_client()
