"""
HMS seed command: creates reproducible demo data.

Usage:
    python manage.py seed           # seed all apps
    python manage.py seed --flush   # delete seeded data first, then rebuild

Staff accounts (password "test1234"): admin, reception1, reception2,
dr.hassan, dr.smith, pharma1.
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from hms_backend.core.seeders import seed_core
from hms_backend.patients.seeders import seed_patients
from hms_backend.pharmacy.seeders import seed_pharmacy


class Command(BaseCommand):
    help = "Seed database with demo staff, patients and inventory"

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Delete seeded users, all patients and inventory before seeding (audit log is kept).",
        )

    def handle(self, *args, **options):
        flush = options.get("flush", False)

        self.stdout.write("=" * 80)
        self.stdout.write("  HMS Seed")
        self.stdout.write("=" * 80)

        try:
            with transaction.atomic():
                stats = {}

                self.stdout.write("\n[1/3] Seeding Core (Users)...")
                core_stats = seed_core(flush=flush)
                stats.update(core_stats)
                self._print_stats(core_stats)

                self.stdout.write("\n[2/3] Seeding Patients (Records, Appointments, Bills)...")
                patient_stats = seed_patients(flush=flush)
                stats.update(patient_stats)
                self._print_stats(patient_stats)

                self.stdout.write("\n[3/3] Seeding Pharmacy (Inventory)...")
                pharmacy_stats = seed_pharmacy(flush=flush)
                stats.update(pharmacy_stats)
                self._print_stats(pharmacy_stats)

        except Exception as e:
            self.stderr.write(f"\nSeeding failed: {e}")
            raise

        self.stdout.write("\n" + "=" * 80)
        self.stdout.write(self.style.SUCCESS("  Seeding completed"))
        self.stdout.write("=" * 80)
        self._print_summary(stats)

    def _print_stats(self, stats):
        for key, value in stats.items():
            self.stdout.write(f"  - {key}: {value}")

    def _print_summary(self, stats):
        self.stdout.write("\nRecords (total):")
        for key, value in sorted(stats.items()):
            self.stdout.write(f"  - {key}: {value}")
