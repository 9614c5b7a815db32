"""Database engine and session management for the credential store and lançamentos."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from controle_financeiro.core.config import Settings, settings


def _connect_args(s: Settings) -> dict[str, Any]:
    """Bound connect and statement time by DATABASE_TIMEOUT_SEC."""
    timeout = s.DATABASE_TIMEOUT_SEC
    if s.DATABASE_URL.startswith("sqlite"):
        return {"timeout": timeout, "check_same_thread": False}
    return {
        "connect_timeout": int(timeout),
        "options": f"-c statement_timeout={int(timeout * 1000)}",
    }


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings),
    echo=settings.DEBUG,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
