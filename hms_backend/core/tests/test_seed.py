from __future__ import annotations

from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from hms_backend.billing.models import Bill
from hms_backend.core import access
from hms_backend.core.models import User
from hms_backend.patients.models import Patient
from hms_backend.pharmacy.models import InventoryItem


class SeedCommandTest(TestCase):
    databases = {"default"}

    def test_seed_creates_staff_for_every_role(self):
        call_command("seed", stdout=StringIO())

        roles = {access.normalize_role(r) for r in User.objects.values_list("role", flat=True)}
        self.assertEqual(roles, set(access.ROLE_WORKFLOWS))
        self.assertTrue(User.objects.get(username="pharma1").check_password("test1234"))

    def test_seed_creates_patients_and_stock(self):
        call_command("seed", stdout=StringIO())

        self.assertGreater(Patient.objects.count(), 0)
        self.assertGreater(InventoryItem.objects.count(), 0)
        paid = Bill.objects.filter(status=Bill.STATUS_PAID)
        self.assertFalse(paid.filter(payment_method__isnull=True).exists())

    def test_seed_is_repeatable(self):
        call_command("seed", stdout=StringIO())
        patients = Patient.objects.count()

        call_command("seed", stdout=StringIO())

        self.assertEqual(Patient.objects.count(), patients)
        self.assertEqual(User.objects.filter(username="admin").count(), 1)

    def test_seed_flush_rebuilds(self):
        call_command("seed", stdout=StringIO())
        Patient.objects.create(full_name="Extra")

        call_command("seed", "--flush", stdout=StringIO())

        self.assertFalse(Patient.objects.filter(full_name="Extra").exists())
