"""Shared fixtures. The app's engine is pointed at in-memory SQLite before it is imported."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from product_api.models import Base
from product_api.repository import SqlProductRepository
from product_api.service import ProductService
from tests.support import InMemoryProductRepository


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    s = Session(bind=engine, autoflush=False, future=True)
    try:
        yield s
    finally:
        s.close()
        engine.dispose()


@pytest.fixture
def sql_repository(session):
    return SqlProductRepository(session)


@pytest.fixture
def repository():
    return InMemoryProductRepository()


@pytest.fixture
def service(repository):
    return ProductService(repository)


@pytest.fixture
def client():
    from product_api.db import engine
    from product_api.main import app

    # Fresh tables per test; startup recreates them
    Base.metadata.drop_all(bind=engine)
    with TestClient(app) as c:
        yield c
