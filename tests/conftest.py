# tests/conftest.py
"""
Shared fixtures.

Each test gets its own SQLite file under ``tmp_path`` so tests never share
state. Factories write through short-lived sessions that commit and close
immediately: SQLite takes the write lock at BEGIN, so a fixture session left
open would block the API client and worker threads.
"""

import os

# Set before any fitflow import so module-level settings pick it up
os.environ.setdefault("ENVIRONMENT", "test")
os.environ["IS_TESTING"] = "true"

from typing import Callable, Dict, Optional

from fastapi.testclient import TestClient
import pytest

from fitflow.auth import create_access_token
from fitflow.core.config import Settings
from fitflow.core.enums import TrainerStatus, UserRole
from fitflow.database import Database
from fitflow.integrations.payment_gateway import FakePaymentGateway
from fitflow.main import create_app
from fitflow.models.trainer import Trainer, TrainerSlot
from fitflow.models.user import User


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'fitflow-test.db'}",
        environment="test",
        secret_key="fitflow-test-secret-key-0123456789abcdef",
        identity_provider_secret="fitflow-test-idp-secret-0123456789abcdef",
        cookie_secure=False,
        cors_origins="http://localhost:5173",
        is_testing=True,
    )


@pytest.fixture
def database(test_settings):
    handle = Database.from_settings(test_settings)
    handle.create_all()
    yield handle
    handle.dispose()


@pytest.fixture
def db(database):
    """A session for service-level tests. Services commit their own work."""
    session = database.session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def app(test_settings, database, gateway):
    return create_app(test_settings, database=database, payment_gateway=gateway)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


# ============================================================================
# Factories
# ============================================================================


@pytest.fixture
def make_user(database) -> Callable[..., User]:
    def _make(
        email: str, role: UserRole = UserRole.MEMBER, display_name: Optional[str] = None
    ) -> User:
        with database.session_scope() as session:
            user = User(email=email, role=role.value, display_name=display_name)
            session.add(user)
            session.flush()
            session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_trainer(database, make_user) -> Callable[..., Trainer]:
    def _make(
        email: str = "coach@example.com",
        name: str = "Casey Coach",
        status: TrainerStatus = TrainerStatus.ACCEPTED,
    ) -> Trainer:
        role = UserRole.TRAINER if status is TrainerStatus.ACCEPTED else UserRole.MEMBER
        make_user(email, role=role, display_name=name)
        with database.session_scope() as session:
            trainer = Trainer(
                email=email,
                name=name,
                experience_years=5,
                skills=["Strength", "HIIT"],
                available_days=["Monday", "Wednesday"],
                available_time="Morning",
                status=status.value,
            )
            session.add(trainer)
            session.flush()
            session.refresh(trainer)
        return trainer

    return _make


@pytest.fixture
def make_slot(database) -> Callable[..., TrainerSlot]:
    def _make(trainer_id: str, max_participants: int = 2, name: str = "Morning HIIT") -> TrainerSlot:
        with database.session_scope() as session:
            slot = TrainerSlot(
                trainer_id=trainer_id,
                name=name,
                time="07:00",
                days=["Monday"],
                duration_minutes=45,
                max_participants=max_participants,
                booking_count=0,
                is_booked=False,
            )
            session.add(slot)
            session.flush()
            session.refresh(slot)
        return slot

    return _make


@pytest.fixture
def auth_headers(test_settings) -> Callable[..., Dict[str, str]]:
    def _headers(email: str, role: UserRole = UserRole.MEMBER) -> Dict[str, str]:
        token = create_access_token(
            {"sub": email, "role": role.value}, settings=test_settings
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin_headers(make_user, auth_headers) -> Dict[str, str]:
    make_user("admin@example.com", role=UserRole.ADMIN, display_name="Ada Admin")
    return auth_headers("admin@example.com", UserRole.ADMIN)

