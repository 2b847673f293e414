"""Shared fixtures: in-memory SQLite, a fresh schema per test, and an authenticated client."""

import os

os.environ.setdefault("PAYMENTS_DATABASE_URL", "sqlite://")
os.environ.setdefault("PAYMENTS_ENVIRONMENT", "test")
os.environ.setdefault("PAYMENTS_API_KEY", "test-key")
os.environ.setdefault("PAYMENTS_OTEL_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from payrec.common.db import Base, SessionLocal, engine
from payrec.services.payments import models  # noqa: F401
from payrec.services.payments.main import app
from payrec.services.payments.service import PaymentService

API_KEY = os.environ["PAYMENTS_API_KEY"]


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def service():
    return PaymentService(SessionLocal)


@pytest.fixture
def anonymous_client():
    return TestClient(app)


@pytest.fixture
def client():
    test_client = TestClient(app)
    test_client.headers.update({"X-API-KEY": API_KEY})
    return test_client
