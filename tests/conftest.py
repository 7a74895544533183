import os

# Must be set before the clingo package reads its configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from clingo import models_order  # noqa: E402,F401
from clingo.database import Base, SessionLocal, engine  # noqa: E402
from clingo.main import app  # noqa: E402
from clingo.models import Service, ServiceOption, User  # noqa: E402
from clingo.security_utils import create_jwt_token  # noqa: E402


@pytest.fixture(autouse=True)
def _tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def _create_user(db, email, name, is_admin=False):
    user = User(email=email, name=name, is_verified=True, is_admin=is_admin)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def owner(db):
    return _create_user(db, "owner@example.com", "Olivia Owner")


@pytest.fixture
def stranger(db):
    return _create_user(db, "stranger@example.com", "Sam Stranger")


@pytest.fixture
def admin(db):
    return _create_user(db, "admin@example.com", "Ada Admin", is_admin=True)


@pytest.fixture
def service(db):
    cleaning = Service(
        name="Home Cleaning",
        description="Standard home cleaning",
        type="cleaning",
        price="From $25",
        options=[
            ServiceOption(name="Kitchen", price=25.0),
            ServiceOption(name="Bathroom", price=40.0),
            ServiceOption(name="Windows", price=15.5),
        ],
    )
    db.add(cleaning)
    db.commit()
    db.refresh(cleaning)
    return cleaning


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_jwt_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _headers
