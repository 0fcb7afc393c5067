from __future__ import annotations

from decimal import Decimal

from django.test import TestCase

from rest_framework.test import APIClient

from hms_backend.billing.models import Bill
from hms_backend.billing.services import settle_bill
from hms_backend.core.audit import Actor
from hms_backend.core.exceptions import InvalidStateTransition, NotFound
from hms_backend.core.models import AuditLog, User
from hms_backend.patients.models import Patient


class BillingAPITest(TestCase):
    """Tests for /api/billing/ endpoints.

    RBAC: admin and receptionist may create, list and settle bills.
    """

    databases = {"default"}

    def setUp(self):
        self.receptionist = User.objects.db_manager("default").create_user(
            username="reception_billing_test",
            password="DummyPass123!",
            role="Receptionist",
        )
        self.pharmacist = User.objects.db_manager("default").create_user(
            username="pharma_billing_test",
            password="DummyPass123!",
            role="Pharmacist",
        )
        self.patient = Patient.objects.using("default").create(full_name="Maria Lopez")
        self.bill = Bill.objects.using("default").create(patient=self.patient, amount=Decimal("250.00"))

    def _client_for(self, user: User) -> APIClient:
        client = APIClient()
        client.defaults["HTTP_HOST"] = "localhost"
        client.force_authenticate(user=user)
        return client

    # ========== CREATE ==========

    def test_create_bill_for_existing_patient(self):
        response = self._client_for(self.receptionist).post(
            "/api/billing/",
            {"patient_id": self.patient.id, "amount": "75.50"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], "Unpaid")
        self.assertEqual(Bill.objects.using("default").filter(patient=self.patient).count(), 2)

    def test_create_bill_for_missing_patient_returns_reference_error(self):
        response = self._client_for(self.receptionist).post(
            "/api/billing/",
            {"patient_id": 99999, "amount": "10.00"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "ReferenceError")
        self.assertEqual(Bill.objects.using("default").count(), 1)

    def test_create_bill_negative_amount_returns_validation_error(self):
        response = self._client_for(self.receptionist).post(
            "/api/billing/",
            {"patient_id": self.patient.id, "amount": "-5.00"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "ValidationError")
        self.assertIn("amount", response.data["fields"])

    # ========== LIST ==========

    def test_list_all_includes_patient_name(self):
        response = self._client_for(self.receptionist).get("/api/billing/all/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data[0]["full_name"], "Maria Lopez")
        self.assertEqual(response.data[0]["amount"], "250.00")

    def test_patient_bills(self):
        other = Patient.objects.using("default").create(full_name="Someone Else")
        Bill.objects.using("default").create(patient=other, amount=Decimal("10.00"))

        response = self._client_for(self.receptionist).get(f"/api/patients/{self.patient.id}/bills/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual([b["id"] for b in response.data], [self.bill.id])

    def test_list_as_pharmacist_forbidden(self):
        response = self._client_for(self.pharmacist).get("/api/billing/all/")

        self.assertEqual(response.status_code, 403)

    # ========== SETTLE ==========

    def test_pay_marks_bill_paid_and_audits(self):
        response = self._client_for(self.receptionist).put(
            f"/api/billing/{self.bill.id}/pay/",
            {"method": "Cash"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Payment successful")

        self.bill.refresh_from_db()
        self.assertEqual(self.bill.status, Bill.STATUS_PAID)
        self.assertEqual(self.bill.payment_method, "Cash")
        self.assertIsNotNone(self.bill.paid_at)

        entry = AuditLog.objects.using("default").get(action_type="Payment")
        self.assertEqual(entry.subject, f"Inv #{self.bill.id}")
        self.assertEqual(entry.details, "Received via Cash")

    def test_pay_twice_keeps_first_method_and_one_audit_entry(self):
        client = self._client_for(self.receptionist)

        first = client.put(f"/api/billing/{self.bill.id}/pay/", {"method": "Cash"}, format="json")
        second = client.put(f"/api/billing/{self.bill.id}/pay/", {"method": "Card"}, format="json")

        self.assertEqual(first.status_code, 200)
        self.assertEqual(second.status_code, 409)
        self.assertEqual(second.data["error"], "InvalidStateTransition")

        self.bill.refresh_from_db()
        self.assertEqual(self.bill.payment_method, "Cash")
        self.assertEqual(AuditLog.objects.using("default").filter(action_type="Payment").count(), 1)

    def test_pay_unknown_bill_returns_404(self):
        response = self._client_for(self.receptionist).put(
            "/api/billing/99999/pay/",
            {"method": "Cash"},
            format="json",
        )

        self.assertEqual(response.status_code, 404)
        self.assertFalse(AuditLog.objects.using("default").filter(action_type="Payment").exists())

    def test_pay_without_method_returns_validation_error(self):
        response = self._client_for(self.receptionist).put(
            f"/api/billing/{self.bill.id}/pay/",
            {},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.status, Bill.STATUS_UNPAID)


class SettleBillServiceTest(TestCase):
    databases = {"default"}

    def setUp(self):
        self.actor = Actor("cashier", "Receptionist")
        patient = Patient.objects.using("default").create(full_name="Chen Wei")
        self.bill = Bill.objects.using("default").create(patient=patient, amount=Decimal("100.00"))

    def test_settle_returns_paid_bill(self):
        bill = settle_bill(self.bill.id, method="Mobile Money", actor=self.actor)

        self.assertTrue(bill.is_paid)
        self.assertEqual(bill.payment_method, "Mobile Money")

    def test_settle_paid_bill_raises_invalid_state_transition(self):
        settle_bill(self.bill.id, method="Cash", actor=self.actor)

        with self.assertRaises(InvalidStateTransition):
            settle_bill(self.bill.id, method="Card", actor=self.actor)

    def test_settle_unknown_bill_raises_not_found(self):
        with self.assertRaises(NotFound):
            settle_bill(123456, method="Cash", actor=self.actor)
