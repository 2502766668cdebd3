# tests/conftest.py
import os

# Point the app at a throwaway in-memory database before anything imports it
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

import cms_gateway.models  # noqa: F401
from cms_gateway.auth.keys import issue_key
from cms_gateway.config import runtime_config
from cms_gateway.db import Base, SessionLocal, engine
from cms_gateway.main import app

CMS_PATH = "/v1/cms"


@pytest.fixture(autouse=True)
def _fresh_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    runtime_config.reset()
    yield
    runtime_config.reset()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_key(db):
    """Issue a key with a known secret: make_key("k1", "t1", ["pages:read"])"""
    def _make(secret, tenant_id, permissions, expires_in=None, active=True):
        expires_at = None
        if expires_in is not None:
            expires_at = datetime.now(timezone.utc) + expires_in
        key, _ = issue_key(db, tenant_id, f"test-{secret}", permissions, expires_at, secret=secret)
        if not active:
            key.is_active = False
            db.commit()
        return key
    return _make


@pytest.fixture
def call(client):
    """POST one gateway operation: call("k1", "t1", resource="pages", action="list")"""
    def _call(key=None, tenant=None, **body):
        headers = {}
        if key is not None:
            headers["X-API-Key"] = key
        if tenant is not None:
            headers["X-Tenant-ID"] = tenant
        return client.post(CMS_PATH, json=body, headers=headers)
    return _call
