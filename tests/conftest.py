import os

# point the app at sqlite before anything imports the settings module
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")

import uuid
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shopping_cart.api.dependencies import get_lock_service, get_order_client
from shopping_cart.data.database import Base, get_db
from shopping_cart.data.models import UserModel
from shopping_cart.domain.errors import CartLockedError, OrderNotificationError
from shopping_cart.main import create_app
from shopping_cart.utils.settings import (
    EMAIL_CLAIM,
    JWT_ALGORITHM,
    JWT_AUDIENCE,
    JWT_ISSUER,
    JWT_KEY,
)

USER_EMAIL = "a@x.com"


class FakeLockService:
    """In-memory stand-in for the redis backed per-user lock."""

    def __init__(self):
        self.held = set()
        self.acquired = []

    @contextmanager
    def user_lock(self, user_id, ttl: int = 30):
        if user_id in self.held:
            raise CartLockedError("Another operation on this cart is in progress")
        self.held.add(user_id)
        self.acquired.append(user_id)
        try:
            yield
        finally:
            self.held.discard(user_id)


class FakeOrderClient:
    """Records orders instead of posting them; can be told to fail."""

    def __init__(self):
        self.orders = []
        self.fail = False

    def create_order(self, order):
        if self.fail:
            raise OrderNotificationError("It was not possible to create an order from this cart")
        self.orders.append(order)


def make_token(user_email=USER_EMAIL, key=JWT_KEY, expires_in=timedelta(minutes=5), **overrides):
    """Mint a token the service accepts; overrides set to None drop that claim."""
    claims = {
        EMAIL_CLAIM: user_email,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    claims.update(overrides)
    claims = {k: v for k, v in claims.items() if v is not None}
    return jwt.encode(claims, key, algorithm=JWT_ALGORITHM)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def user(db):
    u = UserModel(id=uuid.uuid4(), email=USER_EMAIL)
    db.add(u)
    db.commit()
    return u


@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def order_client():
    return FakeOrderClient()


@pytest.fixture
def test_client(session_factory, lock_service, order_client):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_order_client] = lambda: order_client
    return TestClient(app)


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}
