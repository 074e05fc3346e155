import os
# Ensure the app factory picks the Testing config & SQLite memory DB
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///:memory:")

import re
import pytest
from messageboard import create_app
from messageboard.extensions import db
from messageboard.models import Message
from messageboard.services.schema import ensure_schema

_CSRF_RE = re.compile(r'name="csrf_token" value="([^"]+)"')

@pytest.fixture(scope="session")
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SECRET_KEY": "test-secret",
        "WTF_CSRF_SECRET_KEY": "test-secret",
        "BOARD_PAGE_SIZE": 10,
        "BOARD_TIMEZONE": "Europe/Berlin",
        "APP_ENV": "test",
    })
    with app.app_context():
        ensure_schema(db.engine)
    yield app
    with app.app_context():
        db.drop_all()

@pytest.fixture()
def client(app):
    return app.test_client()

@pytest.fixture(autouse=True)
def _db_clean(app):
    # Clean BEFORE each test
    with app.app_context():
        db.session.rollback()
        ensure_schema(db.engine)
        db.session.execute(Message.__table__.delete())
        db.session.commit()
    yield
    # And AFTER each test (keeps state hermetic even if a test fails mid-transaction)
    with app.app_context():
        db.session.rollback()
        ensure_schema(db.engine)
        db.session.execute(Message.__table__.delete())
        db.session.commit()

@pytest.fixture()
def csrf_token(client):
    """Token bound to the test client's session, scraped from the rendered form."""
    resp = client.get("/")
    match = _CSRF_RE.search(resp.get_data(as_text=True))
    assert match, "form did not render a csrf_token field"
    return match.group(1)
