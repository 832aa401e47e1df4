import os
import sys
import tempfile
from types import SimpleNamespace
from typing import List, Optional

import pytest

# Ensure project root on sys.path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# File-backed SQLite so request sessions and test threads see the same data
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), "vyronamart_test.db")
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["BREVO_API_KEY"] = ""

from fastapi.testclient import TestClient  # noqa: E402

from app.db.base import Base  # noqa: E402
from app.db.session import SessionLocal, engine  # noqa: E402
from app.db.models.user import User  # noqa: E402
from app.db.models.product import Product  # noqa: E402
from app.services.email_client import SendResult  # noqa: E402


class FakeEmailClient:
    """Records every send; can be told to fail or to raise."""

    def __init__(self):
        self.sent: List[dict] = []
        self.fail = False
        self.raise_error: Optional[Exception] = None

    def send(self, to_address: str, subject: str, html_body: str) -> SendResult:
        self.sent.append({"to": to_address, "subject": subject, "html": html_body})
        if self.raise_error is not None:
            raise self.raise_error
        if self.fail:
            return SendResult(success=False, error="http_500")
        return SendResult(success=True, message_id=f"<msg-{len(self.sent)}@brevo>")


@pytest.fixture()
def db_session():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(name: str = "Asha", balance: int = 0, is_superuser: bool = False, email: Optional[str] = None) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            name=name,
            hashed_password="x",
            is_active=True,
            is_superuser=is_superuser,
            balance=balance,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_product(db_session):
    def _make_product(name: str = "Paperback", price: int = 100, module: str = "social") -> Product:
        product = Product(name=name, price=price, category="books", module=module)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make_product


@pytest.fixture()
def fake_email():
    return FakeEmailClient()


@pytest.fixture()
def client(db_session, fake_email):
    from main import app
    from app.api.dependencies.services import get_email_client

    app.dependency_overrides[get_email_client] = lambda: fake_email
    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        test_client.close()
        app.dependency_overrides.clear()


@pytest.fixture()
def login_as():
    """Make subsequent requests run as ``user`` without a real token."""
    from main import app
    from app.api.dependencies.auth import get_current_user

    def _login_as(user: User):
        principal = SimpleNamespace(
            id=user.id,
            email=user.email,
            name=user.name,
            is_superuser=bool(user.is_superuser),
        )
        app.dependency_overrides[get_current_user] = lambda: principal
        return principal

    return _login_as
