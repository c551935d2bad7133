import os

# Keep the app's own engine off disk; tests use the engine below.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.deps import get_db  # noqa: E402
from db import Base  # noqa: E402
from main import app  # noqa: E402
from models import utc_now  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def future_date():
    return (utc_now() + timedelta(days=30)).isoformat()


@pytest.fixture
def past_date():
    return (utc_now() - timedelta(days=5)).isoformat()


@pytest.fixture
def invoice_payload(future_date):
    def make(**overrides):
        payload = {
            "clientName": "Acme Corporation",
            "clientEmail": "billing@acme.example",
            "items": [
                {"description": "Website development", "quantity": 1, "price": 20000},
                {"description": "Hosting setup", "quantity": 1, "price": 5000},
            ],
            "taxRate": 10,
            "dueDate": future_date,
        }
        payload.update(overrides)
        return payload

    return make


@pytest.fixture
def campaign_payload():
    def make(**overrides):
        payload = {
            "name": "Summer Sale Facebook Campaign",
            "platform": "Facebook",
            "startDate": "2025-06-01",
            "endDate": "2025-06-30",
            "budget": 5000,
            "leadsGenerated": 250,
            "conversions": 45,
            "status": "completed",
        }
        payload.update(overrides)
        return payload

    return make
