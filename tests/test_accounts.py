"""Tests for controle_financeiro.services.accounts: registration, login, and role updates."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError, OperationalError

from controle_financeiro.core.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from controle_financeiro.core.security import decode_access_token
from controle_financeiro.models import Profile
from controle_financeiro.services.accounts import (
    MSG_BAD_CREDENTIALS,
    MSG_LOOKUP_FAILED,
    MSG_REGISTER_FAILED,
    AccountService,
)
from tests.support import ADMIN_EMAIL, TEST_AUTH_CONFIG, new_session, reset_database


class AccountServiceTestCase(unittest.TestCase):
    """Runs against a fresh in-memory SQLite credential store."""

    def setUp(self) -> None:
        reset_database()
        self.db = new_session()
        self.service = AccountService(self.db, TEST_AUTH_CONFIG)

    def tearDown(self) -> None:
        self.db.close()


class TestRegister(AccountServiceTestCase):
    def test_stores_normalized_email_and_hash(self) -> None:
        message = self.service.register("  User@X.com ", "secret1")
        self.assertEqual(message, "Cadastro realizado com sucesso!")
        profile = self.db.query(Profile).one()
        self.assertEqual(profile.email, "user@x.com")
        self.assertNotEqual(profile.password_hash, "secret1")
        self.assertEqual(profile.role_id, 4)
        self.assertIsNotNone(profile.id)
        self.assertIsNotNone(profile.updated_at)

    def test_duplicate_after_normalization_conflicts(self) -> None:
        self.service.register("A@B.com", "secret1")
        with self.assertRaises(ConflictError) as ctx:
            self.service.register("a@b.com ", "secret2")
        self.assertEqual(ctx.exception.message, "E-mail já cadastrado.")
        self.assertEqual(self.db.query(Profile).count(), 1)

    def test_admin_email_gets_role_1(self) -> None:
        self.service.register(ADMIN_EMAIL.upper(), "secret1")
        self.assertEqual(self.db.query(Profile).one().role_id, 1)

    def test_missing_fields(self) -> None:
        for email, password, field in (
            (None, "secret1", "email"),
            ("   ", "secret1", "email"),
            ("user@x.com", None, "password"),
            ("user@x.com", "", "password"),
        ):
            with self.assertRaises(ValidationError) as ctx:
                self.service.register(email, password)
            self.assertEqual(ctx.exception.field, field)
            self.assertEqual(ctx.exception.message, "E-mail e senha são obrigatórios.")

    def test_short_password_rejected(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            self.service.register("user@x.com", "12345")
        self.assertEqual(ctx.exception.message, "Senha deve ter pelo menos 6 caracteres.")
        self.assertEqual(self.db.query(Profile).count(), 0)

    def test_six_characters_is_enough(self) -> None:
        self.service.register("user@x.com", "123456")
        self.assertEqual(self.db.query(Profile).count(), 1)


class TestRegisterStorageFaults(unittest.TestCase):
    """Storage failures surface as generic errors; the unique index catches insert races."""

    def _session(self) -> MagicMock:
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = None
        return session

    def test_short_password_never_touches_storage(self) -> None:
        session = self._session()
        with self.assertRaises(ValidationError):
            AccountService(session, TEST_AUTH_CONFIG).register("user@x.com", "abc")
        session.query.assert_not_called()
        session.add.assert_not_called()
        session.commit.assert_not_called()

    def test_unique_violation_on_insert_is_conflict(self) -> None:
        session = self._session()
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))
        with self.assertRaises(ConflictError):
            AccountService(session, TEST_AUTH_CONFIG).register("user@x.com", "secret1")
        session.rollback.assert_called_once()

    def test_insert_failure_is_generic_storage_error(self) -> None:
        session = self._session()
        session.commit.side_effect = OperationalError("INSERT", {}, Exception("connection reset"))
        with self.assertRaises(StorageError) as ctx:
            AccountService(session, TEST_AUTH_CONFIG).register("user@x.com", "secret1")
        self.assertEqual(ctx.exception.message, MSG_REGISTER_FAILED)
        self.assertNotIn("connection reset", ctx.exception.message)

    def test_duplicate_check_failure_is_storage_error(self) -> None:
        session = MagicMock()
        session.query.side_effect = OperationalError("SELECT", {}, Exception("timeout"))
        with self.assertRaises(StorageError):
            AccountService(session, TEST_AUTH_CONFIG).register("user@x.com", "secret1")
        session.add.assert_not_called()


class TestLogin(AccountServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.service.register("user@x.com", "secret1")

    def test_returns_token_with_identity(self) -> None:
        token = self.service.login("USER@X.com ", "secret1")
        payload = decode_access_token(TEST_AUTH_CONFIG, token)
        profile = self.db.query(Profile).one()
        self.assertEqual(payload["sub"], profile.id)
        self.assertEqual(payload["email"], "user@x.com")
        self.assertEqual(payload["role"], "Ver")
        self.assertNotIn("users.manage", payload["caps"])
        self.assertNotIn("role_id", payload)
        self.assertNotIn(profile.password_hash, token)

    def test_wrong_password_and_unknown_email_are_indistinguishable(self) -> None:
        with self.assertRaises(AuthError) as wrong_password:
            self.service.login("user@x.com", "wrong")
        with self.assertRaises(AuthError) as unknown:
            self.service.login("nobody@x.com", "secret1")
        self.assertEqual(wrong_password.exception.message, MSG_BAD_CREDENTIALS)
        self.assertEqual(unknown.exception.message, MSG_BAD_CREDENTIALS)
        self.assertEqual(
            wrong_password.exception.status_code, unknown.exception.status_code
        )

    def test_password_length_not_rechecked(self) -> None:
        with self.assertRaises(AuthError):
            self.service.login("user@x.com", "abc")

    def test_missing_fields(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.login("", "secret1")

    def test_admin_gets_administrator_label(self) -> None:
        self.service.register(ADMIN_EMAIL, "secret1")
        payload = decode_access_token(TEST_AUTH_CONFIG, self.service.login(ADMIN_EMAIL, "secret1"))
        self.assertEqual(payload["role"], "Administrador")
        self.assertIn("users.manage", payload["caps"])

    def test_lookup_failure_is_storage_error(self) -> None:
        session = MagicMock()
        session.query.side_effect = OperationalError("SELECT", {}, Exception("timeout"))
        with self.assertRaises(StorageError) as ctx:
            AccountService(session, TEST_AUTH_CONFIG).login("user@x.com", "secret1")
        self.assertEqual(ctx.exception.message, MSG_LOOKUP_FAILED)


class TestUpdateRole(AccountServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.service.register("user@x.com", "secret1")
        self.profile = self.db.query(Profile).one()

    def test_changes_role_and_next_login_sees_it(self) -> None:
        before = decode_access_token(TEST_AUTH_CONFIG, self.service.login("user@x.com", "secret1"))
        self.service.update_role(self.profile.id, 1)
        after = decode_access_token(TEST_AUTH_CONFIG, self.service.login("user@x.com", "secret1"))
        self.assertEqual(before["role"], "Ver")
        self.assertEqual(after["role"], "Administrador")

    def test_rejects_role_outside_closed_set(self) -> None:
        for bad in (0, 5, None, "1"):
            with self.assertRaises(ValidationError):
                self.service.update_role(self.profile.id, bad)

    def test_unknown_profile(self) -> None:
        with self.assertRaises(NotFoundError):
            self.service.update_role("does-not-exist", 2)

    def test_list_profiles_ordered_by_email(self) -> None:
        self.service.register("aaa@x.com", "secret1")
        emails = [p.email for p in self.service.list_profiles()]
        self.assertEqual(emails, ["aaa@x.com", "user@x.com"])


if __name__ == "__main__":
    unittest.main()
