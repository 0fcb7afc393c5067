"""
Patient workflows: registration, update, deletion and consultations.

Every workflow:
1. validates its input (InvalidInput)
2. performs its primary write inside ``transaction.atomic(using=...)``
3. translates datastore failures into StorageError
4. records one audit entry after the primary write committed

The audit write is best-effort (``core.audit.record_action`` never raises),
so a broken audit trail never undoes a committed patient change.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from django.db import DatabaseError, transaction

from hms_backend.billing.models import Bill
from hms_backend.core.audit import Actor, record_action
from hms_backend.core.exceptions import InvalidInput, MissingReference, NotFound, StorageError
from hms_backend.patients.models import MedicalRecord, Patient

logger = logging.getLogger(__name__)


def _require_name(full_name: str | None) -> str:
    name = (full_name or '').strip()
    if not name:
        raise InvalidInput('Patient name is required', fields={'name': ['This field may not be blank.']})
    return name


def _check_age(age: int | None) -> int | None:
    if age is not None and age < 0:
        raise InvalidInput('Age must not be negative', fields={'age': ['Ensure this value is greater than or equal to 0.']})
    return age


def register_patient(
    *,
    full_name: str,
    age: int | None = None,
    gender: str = '',
    phone: str = '',
    medical_history: str = '',
    actor: Actor,
    using: str = 'default',
) -> Patient:
    """Insert a patient and audit it as ``Registration``."""
    name = _require_name(full_name)
    _check_age(age)

    try:
        with transaction.atomic(using=using):
            patient = Patient.objects.using(using).create(
                full_name=name,
                age=age,
                gender=gender or '',
                phone=phone or '',
                medical_history=medical_history or '',
            )
    except DatabaseError as exc:
        logger.exception('Patient registration failed (name=%s)', name)
        raise StorageError('Database Error') from exc

    logger.info('Registered patient_id=%s', patient.pk)
    record_action(actor, 'Registration', patient.full_name, 'New patient registered', using=using)
    return patient


def update_patient(
    patient_id: int,
    *,
    full_name: str,
    age: int | None = None,
    phone: str = '',
    actor: Actor,
    using: str = 'default',
) -> Patient:
    """Replace name, age and phone of an existing patient."""
    name = _require_name(full_name)
    _check_age(age)

    try:
        with transaction.atomic(using=using):
            try:
                patient = Patient.objects.using(using).select_for_update().get(pk=patient_id)
            except Patient.DoesNotExist:
                raise NotFound(f'Patient {patient_id} not found')

            patient.full_name = name
            patient.age = age
            patient.phone = phone or ''
            patient.save(using=using, update_fields=['full_name', 'age', 'phone'])
    except DatabaseError as exc:
        logger.exception('Patient update failed (patient_id=%s)', patient_id)
        raise StorageError('Update Error') from exc

    logger.info('Updated patient_id=%s', patient.pk)
    record_action(actor, 'Update', patient.full_name, f'Updated patient ID: {patient.pk}', using=using)
    return patient


def delete_patient(patient_id: int, *, actor: Actor, using: str = 'default') -> dict[str, int]:
    """Delete a patient together with records, appointments and bills.

    Returns the number of removed rows per kind. Unknown ids raise NotFound
    and write no audit entry.
    """
    try:
        with transaction.atomic(using=using):
            try:
                patient = Patient.objects.using(using).select_for_update().get(pk=patient_id)
            except Patient.DoesNotExist:
                raise NotFound(f'Patient {patient_id} not found')

            name = patient.full_name
            _total, per_model = patient.delete()
    except DatabaseError as exc:
        logger.exception('Patient deletion failed (patient_id=%s)', patient_id)
        raise StorageError('Delete Error') from exc

    removed = {
        'records': per_model.get('patients.MedicalRecord', 0),
        'appointments': per_model.get('appointments.Appointment', 0),
        'bills': per_model.get('billing.Bill', 0),
    }
    logger.info('Deleted patient_id=%s removed=%s', patient_id, removed)
    record_action(
        actor,
        'Deletion',
        name,
        f"Deleted patient ID: {patient_id} (records: {removed['records']}, "
        f"appointments: {removed['appointments']}, bills: {removed['bills']})",
        using=using,
    )
    return removed


def record_consultation(
    *,
    patient_id: int,
    doctor_name: str = '',
    diagnosis: str = '',
    prescription: str = '',
    actor: Actor,
    fee: Decimal | None = None,
    using: str = 'default',
) -> tuple[MedicalRecord, Bill]:
    """Write a medical record and its consultation bill as one unit.

    The patient row is locked for the duration, so a concurrent deletion
    cannot leave a record or bill pointing at nothing. Either both rows are
    written or neither is.

    Raises:
        MissingReference: patient does not exist (nothing written)
        StorageError: any datastore failure (nothing written)
    """
    if fee is None:
        fee = settings.HMS_CONSULTATION_FEE

    try:
        with transaction.atomic(using=using):
            try:
                patient = Patient.objects.using(using).select_for_update().get(pk=patient_id)
            except Patient.DoesNotExist:
                raise MissingReference(f'Patient {patient_id} does not exist')

            record = MedicalRecord.objects.using(using).create(
                patient=patient,
                doctor_name=doctor_name or actor.name,
                diagnosis=diagnosis or '',
                prescription=prescription or '',
            )
            bill = Bill.objects.using(using).create(patient=patient, amount=fee)
    except DatabaseError as exc:
        logger.exception('Consultation failed (patient_id=%s)', patient_id)
        raise StorageError('Error saving record') from exc

    logger.info('Recorded consultation record_id=%s bill_id=%s', record.pk, bill.pk)
    record_action(
        actor,
        'Consultation',
        f'ID: {patient_id}',
        f'Prescribed: {prescription or "-"}',
        using=using,
    )
    return record, bill
