import random
from datetime import time, timedelta
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from hms_backend.appointments.models import Appointment
from hms_backend.billing.models import Bill
from hms_backend.patients.models import MedicalRecord, Patient

RANDOM_SEED = 42

PATIENTS = [
    ("Kwame Asante", 34, "Male", "0241000001", "Asthma"),
    ("Fatima Bello", 28, "Female", "0241000002", ""),
    ("Maria Lopez", 61, "Female", "0241000003", "Type 2 diabetes, hypertension"),
    ("Chen Wei", 45, "Male", "0241000004", "Penicillin allergy"),
    ("Ama Owusu", 7, "Female", "0241000005", ""),
    ("Peter Novak", 52, "Male", "0241000006", "Previous appendectomy"),
]

DIAGNOSES = [
    ("Malaria", "Artemether/Lumefantrine 20/120mg"),
    ("Upper respiratory infection", "Amoxicillin 500mg"),
    ("Hypertension follow-up", "Amlodipine 5mg"),
    ("Routine check-up", ""),
]


def seed_patients(flush: bool = False) -> dict:
    """
    Seeds patients with consultation history, appointments and bills.

    Patients are only created when the table is empty (or after flush=True,
    which deletes all patients together with their dependent rows).
    """
    random.seed(RANDOM_SEED)
    stats: dict[str, int] = {}

    with transaction.atomic():
        if flush:
            Patient.objects.all().delete()

        if Patient.objects.exists():
            stats["patients_skipped"] = Patient.objects.count()
            return stats

        today = timezone.localdate()
        records = appointments = bills = 0
        for full_name, age, gender, phone, history in PATIENTS:
            patient = Patient.objects.create(
                full_name=full_name,
                age=age,
                gender=gender,
                phone=phone,
                medical_history=history,
            )

            diagnosis, prescription = random.choice(DIAGNOSES)
            MedicalRecord.objects.create(
                patient=patient,
                doctor_name=random.choice(["Dr. Amina Hassan", "Dr. John Smith"]),
                diagnosis=diagnosis,
                prescription=prescription,
            )
            records += 1

            Bill.objects.create(
                patient=patient,
                amount=Decimal("250.00"),
                status=random.choice([Bill.STATUS_UNPAID, Bill.STATUS_PAID]),
            )
            bills += 1

            Appointment.objects.create(
                patient=patient,
                appointment_date=today + timedelta(days=random.randint(0, 7)),
                appointment_time=time(hour=random.randint(8, 16), minute=random.choice([0, 15, 30, 45])),
                reason="Follow-up",
            )
            appointments += 1

        Bill.objects.filter(status=Bill.STATUS_PAID, payment_method__isnull=True).update(
            payment_method="Cash",
            paid_at=timezone.now(),
        )

        stats["patients"] = len(PATIENTS)
        stats["medical_records"] = records
        stats["appointments"] = appointments
        stats["bills"] = bills

    return stats
