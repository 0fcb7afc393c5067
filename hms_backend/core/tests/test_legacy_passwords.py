"""Tests for plaintext credential handling.

Covers:
- plaintext rows are rejected by default
- transitional mode (HMS_ALLOW_LEGACY_PLAINTEXT_PASSWORDS) re-hashes on login
- the hash_legacy_passwords management command
- bare bcrypt hashes left by the previous server
"""

from __future__ import annotations

from io import StringIO

import bcrypt
from django.core.management import call_command
from django.test import TestCase, override_settings

from rest_framework.test import APIClient

from hms_backend.core.exceptions import InvalidCredentials
from hms_backend.core.models import AuditLog, User
from hms_backend.core.services import authenticate, hash_legacy_passwords, is_bare_bcrypt, is_hashed_password


class LegacyPasswordTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.legacy = User.objects.db_manager("default").create_user(
            username="legacy_user",
            password="unused",
            role="Receptionist",
        )
        # Simulate a row imported from the old users table.
        User.objects.using("default").filter(pk=self.legacy.pk).update(password="plainsecret")

        self.modern = User.objects.db_manager("default").create_user(
            username="modern_user",
            password="HashedPass123!",
            role="Doctor",
        )
        self.unusable = User.objects.db_manager("default").create_user(
            username="unusable_user",
            password=None,
            role="Doctor",
        )

    def test_plaintext_rejected_by_default(self):
        with self.assertRaises(InvalidCredentials):
            authenticate(username="legacy_user", password="plainsecret")

        self.legacy.refresh_from_db()
        self.assertEqual(self.legacy.password, "plainsecret")
        self.assertTrue(
            AuditLog.objects.using("default").filter(action_type="Failed Login", user_name="legacy_user").exists()
        )

    @override_settings(HMS_ALLOW_LEGACY_PLAINTEXT_PASSWORDS=True)
    def test_transitional_mode_accepts_and_rehashes(self):
        user = authenticate(username="legacy_user", password="plainsecret")

        self.assertEqual(user.pk, self.legacy.pk)
        self.legacy.refresh_from_db()
        self.assertTrue(is_hashed_password(self.legacy.password))
        self.assertTrue(self.legacy.check_password("plainsecret"))

    @override_settings(HMS_ALLOW_LEGACY_PLAINTEXT_PASSWORDS=True)
    def test_transitional_mode_still_rejects_wrong_plaintext(self):
        with self.assertRaises(InvalidCredentials):
            authenticate(username="legacy_user", password="plainsecreT")

        self.legacy.refresh_from_db()
        self.assertEqual(self.legacy.password, "plainsecret")

    @override_settings(HMS_ALLOW_LEGACY_PLAINTEXT_PASSWORDS=True)
    def test_unusable_password_never_matches(self):
        with self.assertRaises(InvalidCredentials):
            authenticate(username="unusable_user", password=self.unusable.password)

    def test_hash_command_dry_run_changes_nothing(self):
        out = StringIO()
        call_command("hash_legacy_passwords", "--dry-run", stdout=out)

        self.assertIn("legacy_user", out.getvalue())
        self.assertIn("Would hash 1", out.getvalue())
        self.legacy.refresh_from_db()
        self.assertEqual(self.legacy.password, "plainsecret")

    def test_hash_command_hashes_only_plaintext_rows(self):
        modern_before = User.objects.using("default").get(pk=self.modern.pk).password

        out = StringIO()
        call_command("hash_legacy_passwords", stdout=out)

        self.legacy.refresh_from_db()
        self.assertTrue(is_hashed_password(self.legacy.password))
        self.assertTrue(self.legacy.check_password("plainsecret"))
        self.assertEqual(User.objects.using("default").get(pk=self.modern.pk).password, modern_before)
        self.assertEqual(
            AuditLog.objects.using("default").filter(action_type="Credential Migration").count(),
            1,
        )

        # Default mode now accepts the migrated credential.
        self.assertEqual(authenticate(username="legacy_user", password="plainsecret").pk, self.legacy.pk)

    def test_hash_command_is_idempotent(self):
        call_command("hash_legacy_passwords", stdout=StringIO())
        out = StringIO()
        call_command("hash_legacy_passwords", stdout=out)

        self.assertIn("No plaintext credentials found.", out.getvalue())


class BareBcryptCredentialTest(TestCase):
    """Rows written by the previous server hold bare ``$2b$10$...`` bcrypt hashes."""

    databases = {"default"}

    def setUp(self):
        self.client = APIClient()
        self.client.defaults["HTTP_HOST"] = "localhost"
        self.bcrypt_user = User.objects.db_manager("default").create_user(
            username="bcrypt_admin",
            password="unused",
            role="Admin",
        )
        self.bare_hash = bcrypt.hashpw(b"Secret123!", bcrypt.gensalt(rounds=4)).decode("ascii")
        User.objects.using("default").filter(pk=self.bcrypt_user.pk).update(password=self.bare_hash)

    def _stored(self) -> str:
        return User.objects.using("default").get(pk=self.bcrypt_user.pk).password

    def test_pattern_recognises_all_bcrypt_prefixes(self):
        body = self.bare_hash[3:]
        for prefix in ("$2a", "$2b", "$2y"):
            self.assertTrue(is_bare_bcrypt(prefix + body))
        self.assertFalse(is_bare_bcrypt("plainsecret"))
        self.assertFalse(is_bare_bcrypt("bcrypt$" + self.bare_hash))

    def test_login_accepts_bare_bcrypt_by_default(self):
        response = self.client.post(
            "/api/login/",
            {"username": "bcrypt_admin", "password": "Secret123!"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(is_hashed_password(self._stored()))

    def test_login_with_wrong_password_still_rejected(self):
        with self.assertRaises(InvalidCredentials):
            authenticate(username="bcrypt_admin", password="Secret123?")

        self.assertEqual(self._stored(), "bcrypt$" + self.bare_hash)

    def test_hash_command_rewrites_without_rehashing(self):
        migrated = hash_legacy_passwords()

        self.assertEqual(migrated, ["bcrypt_admin"])
        self.assertEqual(self._stored(), "bcrypt$" + self.bare_hash)

        response = self.client.post(
            "/api/login/",
            {"username": "bcrypt_admin", "password": "Secret123!"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)

    def test_hash_command_normalises_2y_prefix(self):
        User.objects.using("default").filter(pk=self.bcrypt_user.pk).update(password="$2y$" + self.bare_hash[4:])

        hash_legacy_passwords()

        self.assertEqual(self._stored(), "bcrypt$" + self.bare_hash)
        self.assertEqual(authenticate(username="bcrypt_admin", password="Secret123!").pk, self.bcrypt_user.pk)
