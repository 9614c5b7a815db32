"""Shared test wiring: in-memory SQLite credential store and a fixed AuthConfig."""

from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from controle_financeiro.api.routes.auth import get_auth_config
from controle_financeiro.core.config import AuthConfig
from controle_financeiro.core.database import get_db
from controle_financeiro.main import app
from controle_financeiro.models import Base

ADMIN_EMAIL = "admin@controle.test"

TEST_AUTH_CONFIG = AuthConfig(
    jwt_secret="test-secret-0123456789abcdef0123456789abcdef",
    jwt_algorithm="HS256",
    jwt_expire_minutes=60,
    admin_email=ADMIN_EMAIL,
)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def reset_database() -> None:
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)


def new_session() -> Session:
    return TestingSessionLocal()


def _override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def make_client() -> TestClient:
    """Fresh database, app dependencies pointed at it and at TEST_AUTH_CONFIG."""
    reset_database()
    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_auth_config] = lambda: TEST_AUTH_CONFIG
    return TestClient(app)


def clear_overrides() -> None:
    app.dependency_overrides.clear()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
