"""Daily summary for the dashboard.

Only the calendar date of stored timestamps is compared (in the active
time zone), so a bill created at 23:59 counts for that day.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.db.models import Sum
from django.utils import timezone

from hms_backend.appointments.models import Appointment
from hms_backend.billing.models import Bill
from hms_backend.patients.models import Patient

CENT = Decimal('0.01')


def daily_summary(day: date | None = None, *, using: str = 'default') -> dict:
    """New patients, appointments and Paid revenue for ``day`` (default: today)."""
    if day is None:
        day = timezone.localdate()

    new_patients = Patient.objects.using(using).filter(created_at__date=day).count()
    total_appointments = Appointment.objects.using(using).filter(appointment_date=day).count()
    revenue = (
        Bill.objects.using(using)
        .filter(billing_date__date=day, status=Bill.STATUS_PAID)
        .aggregate(total=Sum('amount'))['total']
    )

    return {
        'date': day,
        'newPatients': new_patients,
        'totalAppointments': total_appointments,
        'totalRevenue': (revenue or Decimal('0')).quantize(CENT),
    }
