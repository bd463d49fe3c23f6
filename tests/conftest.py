"""
Shared pytest fixtures for the Privacy Guard test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - cli: Flask CLI runner (function-scoped)
    - installed: Application installed with the placeholder sample owner
    - auth_on: API-key auth switched on with test admin/viewer keys
"""

import pytest

from privacy_guard import create_app
from privacy_guard.models import db as _db
from privacy_guard.services import install_service

ADMIN_KEY = "test-admin-key"
VIEWER_KEY = "test-viewer-key"


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables.

    Recreating also restores the lookup/config tables a reset test dropped.
    """
    with app.app_context():
        yield _db.session
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def cli(app):
    """Flask CLI runner."""
    return app.test_cli_runner()


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def installed():
    """Run a full install with sample data and the placeholder owner."""
    return install_service.perform_installation(include_sample_data=True)


@pytest.fixture()
def auth_on(app, monkeypatch):
    """Enable API-key auth for one test."""
    monkeypatch.delenv("API_AUTH_ENABLED", raising=False)
    monkeypatch.delenv("API_KEYS", raising=False)
    monkeypatch.setitem(app.config, "API_AUTH_ENABLED", "true")
    monkeypatch.setitem(app.config, "API_KEYS", f"{ADMIN_KEY}:admin,{VIEWER_KEY}:viewer")
    return {"admin": {"X-API-Key": ADMIN_KEY}, "viewer": {"X-API-Key": VIEWER_KEY}}
