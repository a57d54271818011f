"""Shared helpers for tests that need the database or a client."""

import unittest

from fastapi.testclient import TestClient

from userhub.core.database import SessionLocal, engine
from userhub.core.security import PasswordHasher
from userhub.models import Base, Role, User
from userhub.repositories.users import UserRepository

PASSWORD = "Secret1"

hasher = PasswordHasher(rounds=4)


class DatabaseTestCase(unittest.TestCase):
    """Fresh users table per test, plus a session closed on teardown."""

    def setUp(self) -> None:
        Base.metadata.create_all(engine)
        self.db = SessionLocal()
        self.repo = UserRepository(self.db)

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(engine)

    def make_user(
        self,
        email: str,
        role: Role = Role.USER,
        name: str = "Test User",
        password: str = PASSWORD,
        banned: bool = False,
    ) -> User:
        user = self.repo.create(
            name=name,
            email=email,
            password_hash=hasher.hash(password),
            role=role,
        )
        if banned:
            user = self.repo.update_by_email(email, {"is_banned": True})
        return user


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient over https so Secure cookies round-trip."""

    def setUp(self) -> None:
        super().setUp()
        from userhub.main import app

        self.app = app
        self.client = TestClient(app, base_url="https://testserver")

    def tearDown(self) -> None:
        self.client.close()
        super().tearDown()

    def login(self, email: str, password: str = PASSWORD) -> str:
        """Log in through the API and return the token; the cookie jar is left empty."""
        r = self.client.post("/api/login", json={"email": email, "password": password})
        self.assertEqual(r.status_code, 200, r.text)
        self.client.cookies.clear()
        return r.json()["token"]

    @staticmethod
    def auth(token: str) -> dict[str, str]:
        """Request headers presenting token as the session cookie."""
        return {"Cookie": f"token={token}"}
