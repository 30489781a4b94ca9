# tests/conftest.py
import os

# must be set before anything under academy reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from academy.core.security import create_token_for_user, get_password_hash
from academy.db.base import Base
from academy.db.session import get_db, make_engine
from academy.main import app
from academy.models.user import ROLE_STUDENT, ROLE_TEACHER
from academy.services import store
from academy.services.uploads import get_uploader

TEST_DATABASE_URL = "sqlite://"
DEFAULT_PASSWORD = "secret-pw"


class FakeUploader:
    """Records uploads instead of talking to S3."""

    def __init__(self):
        self.stored = []

    def store(self, data, *, content_type, filename=None):
        self.stored.append((data, content_type, filename))
        return f"https://photos.test/reservations/{len(self.stored)}.jpg"


@pytest.fixture(scope="function")
def engine():
    engine = make_engine(TEST_DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def client(session_factory, uploader):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_uploader] = lambda: uploader
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make(role=ROLE_STUDENT, *, phone=None, name=None, seat_number=None):
        counter["n"] += 1
        n = counter["n"]
        user = store.create_user(
            db_session,
            phone_number=phone or f"0100000{n:04d}",
            password_hash=get_password_hash(DEFAULT_PASSWORD),
            name=name or f"Student {n}",
            seat_number=seat_number if seat_number is not None else n,
            role=role,
        )
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def student(make_user):
    return make_user(name="Kim Student")


@pytest.fixture
def other_student(make_user):
    return make_user(name="Lee Student")


@pytest.fixture
def teacher(make_user):
    return make_user(ROLE_TEACHER, phone="7777", name="Teacher", seat_number=0)


@pytest.fixture
def schedules(db_session):
    """Monday 1-3 and Tuesday 1-2, capacity 4 each."""
    created = [
        store.create_schedule(db_session, day_of_week=day, period_number=period, capacity=4)
        for day, period in [
            ("Monday", 1),
            ("Monday", 2),
            ("Monday", 3),
            ("Tuesday", 1),
            ("Tuesday", 2),
        ]
    ]
    db_session.commit()
    for s in created:
        db_session.refresh(s)
    return created


def auth_headers(user):
    return {"Authorization": f"Bearer {create_token_for_user(user)}"}


@pytest.fixture
def headers_for():
    return auth_headers
