"""Appointment scheduling.

Scheduling writes no audit entry. Double-booking is not checked: several
appointments may share date, time and patient.
"""

from __future__ import annotations

import logging
from datetime import date, time

from django.db import DatabaseError, transaction

from hms_backend.appointments.models import Appointment
from hms_backend.core.exceptions import MissingReference, StorageError
from hms_backend.patients.models import Patient

logger = logging.getLogger(__name__)


def schedule_appointment(
    *,
    patient_id: int,
    appointment_date: date,
    appointment_time: time,
    reason: str = '',
    using: str = 'default',
) -> Appointment:
    """Insert an appointment for an existing patient.

    Raises:
        MissingReference: patient does not exist
        StorageError: datastore failure
    """
    try:
        with transaction.atomic(using=using):
            patient = Patient.objects.using(using).filter(pk=patient_id).first()
            if patient is None:
                raise MissingReference(f'Patient {patient_id} does not exist')
            appointment = Appointment.objects.using(using).create(
                patient=patient,
                appointment_date=appointment_date,
                appointment_time=appointment_time,
                reason=reason or '',
            )
    except DatabaseError as exc:
        logger.exception('Appointment scheduling failed (patient_id=%s)', patient_id)
        raise StorageError('Appointment Error') from exc

    logger.info(
        'Scheduled appointment_id=%s patient_id=%s at %s %s',
        appointment.pk,
        patient_id,
        appointment_date,
        appointment_time,
    )
    return appointment
