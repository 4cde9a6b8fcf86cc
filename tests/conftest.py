import os

os.environ.setdefault("AUTH_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_today
from app.core.config import settings
from app.core.security import sign
from app.db.base import Base
from app.db.session import get_db, make_engine
from app.main import app
from app.models import Week

# a Wednesday
TODAY = date(2025, 9, 10)


@pytest.fixture
def db():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_today] = lambda: TODAY
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _headers(role: str) -> dict:
    token = sign({"sub": role, "role": role}, secret=settings.AUTH_SECRET, ttl_seconds=3600)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return _headers("admin")


@pytest.fixture
def student_headers():
    return _headers("student")


@pytest.fixture
def add_week(db):
    def _add(name, start, end, status="future"):
        week = Week(name=name, start_date=start, end_date=end, status=status)
        db.add(week)
        db.commit()
        return week
    return _add
