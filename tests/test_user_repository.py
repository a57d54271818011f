"""Tests for userhub.repositories.users against an in-memory SQLite store."""

import unittest
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from support import DatabaseTestCase, hasher

from userhub.core.errors import (
    DuplicateKeyError,
    InternalError,
    UserNotFoundError,
    ValidationFailedError,
)
from userhub.models import Role, User


class TestCreate(DatabaseTestCase):
    def test_defaults_and_normalization(self) -> None:
        user = self.repo.create(
            name="  Ann  ",
            email="  Ann@X.COM ",
            password_hash=hasher.hash("Secret1"),
        )
        self.assertEqual(user.name, "Ann")
        self.assertEqual(user.email, "ann@x.com")
        self.assertIs(user.role, Role.USER)
        self.assertFalse(user.is_banned)
        self.assertIsNone(user.address)
        self.assertTrue(user.id)
        self.assertIsNotNone(user.created_at)
        self.assertIsNotNone(user.updated_at)

    def test_duplicate_email_fails_and_keeps_one_record(self) -> None:
        self.make_user("a@x.com")
        with self.assertRaises(DuplicateKeyError) as ctx:
            self.repo.create(name="Other", email="A@x.com", password_hash=hasher.hash("pw"))
        self.assertEqual(ctx.exception.field, "email")
        self.assertEqual(self.db.query(User).count(), 1)

    def test_duplicate_and_validation_are_distinguishable(self) -> None:
        self.make_user("a@x.com")
        with self.assertRaises(ValidationFailedError):
            self.repo.create(name="", email="b@x.com", password_hash="h")
        with self.assertRaises(DuplicateKeyError):
            self.repo.create(name="B", email="a@x.com", password_hash="h")

    def test_rejects_malformed_fields(self) -> None:
        cases = [
            {"name": "   ", "email": "b@x.com", "password_hash": "h"},
            {"name": "B", "email": "not-an-email", "password_hash": "h"},
            {"name": "B", "email": "b@x.com", "password_hash": ""},
            {"name": "B", "email": "b@x.com", "password_hash": "h", "role": "root"},
        ]
        for kwargs in cases:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValidationFailedError):
                    self.repo.create(**kwargs)
        self.assertEqual(self.db.query(User).count(), 0)


class TestReads(DatabaseTestCase):
    def test_find_by_email_is_case_insensitive(self) -> None:
        created = self.make_user("a@x.com")
        self.assertEqual(self.repo.find_by_email(" A@X.com").id, created.id)
        self.assertIsNone(self.repo.find_by_email("missing@x.com"))

    def test_find_by_id(self) -> None:
        created = self.make_user("a@x.com")
        self.assertEqual(self.repo.find_by_id(created.id).email, "a@x.com")
        self.assertIsNone(self.repo.find_by_id("00000000-0000-0000-0000-000000000000"))

    def test_projections_never_contain_password(self) -> None:
        self.make_user("a@x.com")
        self.make_user("b@x.com", role=Role.ADMIN)
        listed = self.repo.find_all()
        self.assertEqual({u.email for u in listed}, {"a@x.com", "b@x.com"})
        for item in listed:
            dumped = item.model_dump(by_alias=True)
            self.assertNotIn("password", dumped)
            self.assertNotIn("password_hash", dumped)
            self.assertIn("id", dumped)
            self.assertIn("isBanned", dumped)

        details = self.repo.get_projected_by_email("a@x.com").model_dump(by_alias=True)
        self.assertNotIn("password_hash", details)
        self.assertNotIn("id", details)
        self.assertEqual(details["email"], "a@x.com")
        self.assertIsNone(self.repo.get_projected_by_email("missing@x.com"))


class TestUpdate(DatabaseTestCase):
    def test_partial_update_changes_only_given_fields(self) -> None:
        self.make_user("a@x.com", name="Ann")
        user = self.repo.update_by_email("a@x.com", {"address": "1 Main St"})
        self.assertEqual(user.address, "1 Main St")
        self.assertEqual(user.name, "Ann")
        self.assertIs(user.role, Role.USER)

    def test_role_and_ban(self) -> None:
        self.make_user("a@x.com")
        user = self.repo.update_by_email("a@x.com", {"role": "moderator", "is_banned": True})
        self.assertIs(user.role, Role.MODERATOR)
        self.assertTrue(user.is_banned)

    def test_unknown_email_is_not_found(self) -> None:
        with self.assertRaises(UserNotFoundError):
            self.repo.update_by_email("missing@x.com", {"name": "X"})

    def test_validators_run_on_update(self) -> None:
        self.make_user("a@x.com", name="Ann")
        with self.assertRaises(ValidationFailedError):
            self.repo.update_by_email("a@x.com", {"role": "root"})
        with self.assertRaises(ValidationFailedError):
            self.repo.update_by_email("a@x.com", {"name": ""})
        self.db.expire_all()
        user = self.repo.find_by_email("a@x.com")
        self.assertEqual(user.name, "Ann")
        self.assertIs(user.role, Role.USER)

    def test_immutable_fields_cannot_be_patched(self) -> None:
        self.make_user("a@x.com")
        for fields in ({"email": "b@x.com"}, {"password_hash": "x"}, {"id": "x"}):
            with self.subTest(fields=fields):
                with self.assertRaises(ValidationFailedError):
                    self.repo.update_by_email("a@x.com", fields)


class TestDelete(DatabaseTestCase):
    def test_delete_existing(self) -> None:
        self.make_user("a@x.com")
        self.assertTrue(self.repo.delete_by_email("A@x.com"))
        self.assertIsNone(self.repo.find_by_email("a@x.com"))

    def test_delete_missing_returns_false(self) -> None:
        self.assertFalse(self.repo.delete_by_email("missing@x.com"))


class TestDatabaseFailures(DatabaseTestCase):
    """A failing commit is rolled back and surfaces as a generic InternalError."""

    def setUp(self) -> None:
        super().setUp()
        self.failure = OperationalError(
            "COMMIT", {}, Exception("disk I/O error at /var/lib/secret")
        )

    def _failing_commit(self):
        return patch.object(self.db, "commit", side_effect=self.failure)

    def _assert_generic(self, exc: InternalError, message: str) -> None:
        self.assertEqual(exc.message, message)
        self.assertEqual(exc.status_code, 500)
        self.assertNotIn("disk I/O", exc.message)
        self.assertNotIn("/var/lib/secret", exc.message)

    def test_create_rolls_back(self) -> None:
        with patch.object(self.db, "rollback", wraps=self.db.rollback) as rollback:
            with self._failing_commit(), self.assertLogs(
                "userhub.repositories.users", "ERROR"
            ):
                with self.assertRaises(InternalError) as ctx:
                    self.repo.create(
                        name="Ann", email="a@x.com", password_hash=hasher.hash("Secret1")
                    )
            rollback.assert_called_once()
        self._assert_generic(
            ctx.exception, "An unexpected error occurred while creating the user."
        )
        self.assertEqual(self.db.query(User).count(), 0)

    def test_update_rolls_back(self) -> None:
        self.make_user("a@x.com", name="Ann")
        with patch.object(self.db, "rollback", wraps=self.db.rollback) as rollback:
            with self._failing_commit(), self.assertLogs(
                "userhub.repositories.users", "ERROR"
            ):
                with self.assertRaises(InternalError) as ctx:
                    self.repo.update_by_email("a@x.com", {"name": "Changed"})
            rollback.assert_called_once()
        self._assert_generic(ctx.exception, "Error updating user")
        self.assertEqual(self.repo.find_by_email("a@x.com").name, "Ann")

    def test_delete_rolls_back(self) -> None:
        self.make_user("a@x.com")
        with patch.object(self.db, "rollback", wraps=self.db.rollback) as rollback:
            with self._failing_commit(), self.assertLogs(
                "userhub.repositories.users", "ERROR"
            ):
                with self.assertRaises(InternalError) as ctx:
                    self.repo.delete_by_email("a@x.com")
            rollback.assert_called_once()
        self._assert_generic(ctx.exception, "Error deleting the user")
        self.assertIsNotNone(self.repo.find_by_email("a@x.com"))


if __name__ == "__main__":
    unittest.main()
