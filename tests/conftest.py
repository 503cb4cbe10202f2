"""Test fixtures for stepauth."""
import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

_tmp_dir = Path(tempfile.mkdtemp(prefix="stepauth-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_tmp_dir / 'test.db'}"

from stepauth import main  # noqa: E402
from stepauth.auth import users  # noqa: E402
from stepauth.auth.pending_totp import pending_totp  # noqa: E402
from stepauth.database.database import Base, SessionLocal, engine  # noqa: E402


@pytest.fixture(autouse=True)
def schema():
    """Give every test an empty schema."""
    Base.metadata.create_all(bind=engine)
    pending_totp.clear()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(main.app) as c:
        yield c


@pytest.fixture
def alice(db):
    """A registered user with a password, 50 recovery codes and one session."""
    return users.register_user(db, "alice", "alice@example.com", "correct horse battery")
