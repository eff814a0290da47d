# backend/tests/conftest.py
"""
Pytest configuration for the studio backend.

Every test runs against a fresh in-memory SQLite database. JSONB columns
fall back to JSON there, and ``SELECT ... FOR UPDATE`` is ignored.
"""

import os

# Set the database URLs BEFORE any app imports so the module-level engine
# never points at a real server.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TEST_DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import timedelta
from decimal import Decimal

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies import database as database_dependency
from app.core.timezone_utils import utc_now
from app.database import Base, get_db
from app.main import app
from app.models.giftcard import Giftcard
from app.models.product import Product
from app.models.timecard import Employee

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=test_engine, expire_on_commit=False
)


@pytest.fixture(scope="function")
def db():
    """Create a new database session (and schema) for each test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db: Session):
    """Create a test client bound to the test session."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[database_dependency.get_db] = override_get_db

    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


@pytest.fixture
def wheel_product(db: Session) -> Product:
    product = Product(
        name="Paquete 4 Clases de Torno",
        type="CLASS_PACKAGE",
        price=Decimal("180.00"),
        sessions=4,
    )
    db.add(product)
    db.commit()
    return product


@pytest.fixture
def painting_product(db: Session) -> Product:
    product = Product(
        name="Pintura de piezas",
        type="SINGLE_CLASS",
        price=Decimal("25.00"),
        sessions=1,
    )
    db.add(product)
    db.commit()
    return product


@pytest.fixture
def giftcard(db: Session) -> Giftcard:
    card = Giftcard(
        code="GC-TEST01",
        initial_value=Decimal("50.00"),
        balance=Decimal("50.00"),
        status="active",
        expires_at=utc_now() + timedelta(days=90),
        redeemed_history=[],
    )
    db.add(card)
    db.commit()
    return card


@pytest.fixture
def employee(db: Session) -> Employee:
    person = Employee(code="ANA01", name="Ana Torres", position="Instructora", status="active")
    db.add(person)
    db.commit()
    return person
