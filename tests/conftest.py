# tests/conftest.py
# ---------------------------------------------------------------------
# - DATABASE_URL points at a throwaway SQLite file; it must be set before
#   config/database are imported, so it happens at module import time
# - The schema is dropped and recreated for every test
# - `db` is a plain session for calling services directly
# - `client` drives the FastAPI app end to end
# ---------------------------------------------------------------------
import os
import tempfile
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="liquor-ledger-tests-"))
OWNER_PASSWORD = "owner-secret"

os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'ledger_test.db'}"
os.environ["OWNER_PASSWORD"] = OWNER_PASSWORD

import pytest
from fastapi.testclient import TestClient

from database import Base, engine, SessionLocal, init_db
from main import app
from models.brand import Brand
from utils.owner_auth import SharedSecretAuthorizer


@pytest.fixture(autouse=True)
def _fresh_schema():
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def owner():
    return SharedSecretAuthorizer(OWNER_PASSWORD)


@pytest.fixture()
def owner_password():
    return OWNER_PASSWORD


@pytest.fixture()
def owner_headers():
    return {"X-Owner-Password": OWNER_PASSWORD}


# ---------- Handy lookups ----------
def quantity_of(db, brand_id: int) -> int:
    """Current quantity straight from the table, bypassing the identity map."""
    return db.query(Brand.quantity).filter(Brand.id == brand_id).scalar()
