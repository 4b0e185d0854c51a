import os

# Test environment, must be set before the app is imported
os.environ["TESTING"] = "1"
os.environ["DATABASE_URL"] = "sqlite://"

import pytest

import config
from database import SessionLocal
from models import Base, HostDB

# ---------------------------------------------------------
# DB Setup Fixture
# ---------------------------------------------------------
@pytest.fixture(autouse=True)
def setup_db():
    db = SessionLocal()
    Base.metadata.drop_all(bind=db.bind)
    Base.metadata.create_all(bind=db.bind)
    yield
    db.close()

# ---------------------------------------------------------
# Keep collaborators offline
# ---------------------------------------------------------
@pytest.fixture(autouse=True)
def no_email_config(monkeypatch):
    monkeypatch.setattr(config, "SERVICE_ACCOUNT_FILE", None)
    monkeypatch.setattr(config, "GMAIL_SENDER", None)

@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

def create_test_host(db, name="jane", email="jane@example.com", timezone="UTC", google_access_token=None):
    host = HostDB(name=name, email=email, timezone=timezone, google_access_token=google_access_token)
    db.add(host)
    db.commit()
    db.refresh(host)
    return host

@pytest.fixture
def host(db):
    return create_test_host(db)
