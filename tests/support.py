"""Shared fixtures: in-memory SQLite store wired into the FastAPI app, plus request helpers."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from newcloud_auth.core.database import get_db
from newcloud_auth.main import app
from newcloud_auth.models import Base, Role, User
from newcloud_auth.models.user import ROLE_NAMES, ROLE_USER
from newcloud_auth.services.accounts import create_user

PREFIX = "/auth"


def make_engine():
    """Fresh in-memory database with foreign keys enforced and roles seeded."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    with Session(engine) as db:
        db.add_all([Role(name=name) for name in ROLE_NAMES])
        db.commit()
    return engine


class DatabaseTestCase(unittest.TestCase):
    """Each test gets its own empty database (roles seeded)."""

    def setUp(self) -> None:
        self.engine = make_engine()
        self.SessionTesting = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db = self.SessionTesting()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()

    def make_user(self, username: str, password: str = "pw1", role: str = ROLE_USER, **fields) -> User:
        return create_user(
            self.db,
            username=username,
            password=password,
            first_name=fields.pop("first_name", username.title()),
            last_name=fields.pop("last_name", "Tester"),
            role=role,
            **fields,
        )


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient whose get_db yields sessions on the test database."""

    def setUp(self) -> None:
        super().setUp()

        def override_get_db():
            db = self.SessionTesting()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.pop(get_db, None)
        super().tearDown()

    def register(self, username: str, password: str = "pw1", **extra) -> str:
        body = {
            "username": username,
            "password": password,
            "firstName": extra.pop("firstName", username.title()),
            "lastName": extra.pop("lastName", "Tester"),
            **extra,
        }
        resp = self.client.post(f"{PREFIX}/register", json=body)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["token"]

    def login(self, username: str, password: str = "pw1") -> str:
        resp = self.client.post(f"{PREFIX}/login", json={"username": username, "password": password})
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()["token"]

    def user_with_token(self, username: str, role: str = ROLE_USER) -> tuple[User, dict[str, str]]:
        """Create a user directly in the store with the given role and log them in."""
        user = self.make_user(username, role=role)
        return user, self.auth(self.login(username))

    @staticmethod
    def auth(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}
