"""Tests for the audit trail.

Covers:
- record_action writes one entry and never raises
- entries are immutable
- GET /api/audit-logs/ (RBAC, ordering, page size, search)
- GET /api/audit-logs/export/ (CSV)
"""

from __future__ import annotations

import csv
import io
from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase, override_settings

from rest_framework.test import APIClient

from hms_backend.core.audit import SYSTEM, Actor, record_action
from hms_backend.core.models import AuditLog, User


class RecordActionTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.user = User.objects.db_manager("default").create_user(
            username="audit_actor",
            password="DummyPass123!",
            role="Receptionist",
        )

    def test_record_action_writes_entry_from_user(self):
        record_action(Actor.from_user(self.user), "Registration", "Jane Doe", "New patient registered")

        entry = AuditLog.objects.using("default").get()
        self.assertEqual(entry.user_id, self.user.id)
        self.assertEqual(entry.user_name, "audit_actor")
        self.assertEqual(entry.user_role, "Receptionist")
        self.assertEqual(entry.action_type, "Registration")
        self.assertEqual(entry.subject, "Jane Doe")
        self.assertEqual(entry.details, "New patient registered")
        self.assertIsNotNone(entry.action_timestamp)

    def test_record_action_defaults_subject(self):
        record_action(SYSTEM, "Login")

        entry = AuditLog.objects.using("default").get()
        self.assertEqual(entry.subject, "N/A")
        self.assertIsNone(entry.user_id)

    @patch("hms_backend.core.audit.AuditLog")
    def test_record_action_swallows_storage_failures(self, mock_model):
        mock_model.objects.using.return_value.create.side_effect = DatabaseError("audit table gone")

        with self.assertLogs("hms_backend.core.audit", level="ERROR") as logs:
            record_action(SYSTEM, "Payment", "Inv #1", "Received via Cash")

        self.assertIn("AuditLog write failed", logs.output[0])

    def test_entries_cannot_be_updated_or_deleted(self):
        record_action(SYSTEM, "Login")
        entry = AuditLog.objects.using("default").get()

        entry.details = "tampered"
        with self.assertRaises(TypeError):
            entry.save()
        with self.assertRaises(TypeError):
            entry.delete()
        with self.assertRaises(TypeError):
            AuditLog.objects.using("default").all().delete()

        self.assertEqual(AuditLog.objects.using("default").get().details, "")


class AuditLogAPITest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.admin = User.objects.db_manager("default").create_user(
            username="admin_audit_test",
            password="DummyPass123!",
            role="admin",
        )
        self.receptionist = User.objects.db_manager("default").create_user(
            username="reception_audit_test",
            password="DummyPass123!",
            role="Receptionist",
        )

        record_action(Actor("alice", "Receptionist"), "Registration", "Jane Doe", "New patient registered")
        record_action(Actor("bob", "Doctor"), "Consultation", "ID: 7", "Prescribed: Amoxicillin")
        record_action(Actor("carol", "Receptionist"), "Payment", "Inv #3", "Received via Cash")

    def _client_for(self, user) -> APIClient:
        client = APIClient()
        client.defaults["HTTP_HOST"] = "localhost"
        client.force_authenticate(user=user)
        return client

    def test_list_as_admin_newest_first(self):
        response = self._client_for(self.admin).get("/api/audit-logs/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            [row["action_type"] for row in response.data],
            ["Payment", "Consultation", "Registration"],
        )

    def test_list_as_receptionist_forbidden(self):
        response = self._client_for(self.receptionist).get("/api/audit-logs/")

        self.assertEqual(response.status_code, 403)

    @override_settings(HMS_AUDIT_PAGE_SIZE=2)
    def test_list_is_limited_to_page_size(self):
        response = self._client_for(self.admin).get("/api/audit-logs/")

        self.assertEqual(len(response.data), 2)
        self.assertEqual(response.data[0]["action_type"], "Payment")

    def test_search_matches_user_action_and_subject(self):
        client = self._client_for(self.admin)

        by_user = client.get("/api/audit-logs/", {"q": "ALICE"})
        by_action = client.get("/api/audit-logs/", {"q": "consult"})
        by_subject = client.get("/api/audit-logs/", {"q": "Inv #3"})

        self.assertEqual([r["user_name"] for r in by_user.data], ["alice"])
        self.assertEqual([r["action_type"] for r in by_action.data], ["Consultation"])
        self.assertEqual([r["subject"] for r in by_subject.data], ["Inv #3"])

    def test_list_writes_no_audit_entries(self):
        client = self._client_for(self.admin)
        before = AuditLog.objects.using("default").count()

        first = client.get("/api/audit-logs/")
        second = client.get("/api/audit-logs/")

        self.assertEqual(first.data, second.data)
        self.assertEqual(AuditLog.objects.using("default").count(), before)

    def test_export_returns_csv_with_all_entries(self):
        response = self._client_for(self.admin).get("/api/audit-logs/export/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "text/csv")
        self.assertIn("attachment;", response["Content-Disposition"])

        rows = list(csv.reader(io.StringIO(response.content.decode())))
        self.assertEqual(rows[0], ["Timestamp", "User", "Role", "Action", "Patient", "Details"])
        self.assertEqual(len(rows), 4)
        self.assertEqual(rows[1][1:], ["carol", "Receptionist", "Payment", "Inv #3", "Received via Cash"])

    @override_settings(HMS_AUDIT_PAGE_SIZE=1)
    def test_export_ignores_page_size(self):
        response = self._client_for(self.admin).get("/api/audit-logs/export/")

        rows = list(csv.reader(io.StringIO(response.content.decode())))
        self.assertEqual(len(rows), 4)

    def test_export_as_receptionist_forbidden(self):
        response = self._client_for(self.receptionist).get("/api/audit-logs/export/")

        self.assertEqual(response.status_code, 403)

    def test_export_neutralises_formula_cells(self):
        anonymous = APIClient()
        anonymous.defaults["HTTP_HOST"] = "localhost"
        anonymous.post(
            "/api/login/",
            {"username": '=HYPERLINK("http://evil","x")', "password": "whatever"},
            format="json",
        )
        record_action(Actor("dave", "Doctor"), "Consultation", "@SUM(A1:A9)", "-2+3")

        response = self._client_for(self.admin).get("/api/audit-logs/export/")

        rows = list(csv.reader(io.StringIO(response.content.decode())))
        self.assertEqual(rows[1][1:], ["dave", "Doctor", "Consultation", "'@SUM(A1:A9)", "'-2+3"])
        failed = [row for row in rows if row[3] == "Failed Login"]
        self.assertEqual(failed[0][1], '\'=HYPERLINK("http://evil","x")')
        for row in rows[1:]:
            for cell in row[1:]:
                self.assertFalse(cell.startswith(("=", "+", "-", "@", "\t", "\r")), cell)
