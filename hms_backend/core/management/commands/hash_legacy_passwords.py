"""
One-time migration of plaintext credentials to Django password hashes.

Usage:
    python manage.py hash_legacy_passwords --dry-run   # list affected users
    python manage.py hash_legacy_passwords             # hash them in place

Safe to run repeatedly: rows that already hold a recognised hash and
unusable passwords are skipped.
"""

from django.core.management.base import BaseCommand

from hms_backend.core.services import hash_legacy_passwords


class Command(BaseCommand):
    help = "Hash any plaintext passwords left in the users table"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Only report which users would be migrated.",
        )
        parser.add_argument(
            "--database",
            default="default",
            help="Database alias to migrate (default: 'default').",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        migrated = hash_legacy_passwords(dry_run=dry_run, using=options["database"])

        if not migrated:
            self.stdout.write("No plaintext credentials found.")
            return

        verb = "Would hash" if dry_run else "Hashed"
        for username in migrated:
            self.stdout.write(f"  - {username}")
        self.stdout.write(self.style.SUCCESS(f"{verb} {len(migrated)} credential(s)."))
