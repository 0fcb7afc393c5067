"""
Billing workflows: manual invoices and payment settlement.

Settlement is a compare-and-set: a single UPDATE guarded by
``status='Unpaid'``. Of two concurrent payments for the same bill exactly one
matches a row; the other sees zero rows and is rejected without touching the
bill or writing an audit entry.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import DatabaseError, transaction
from django.utils import timezone

from hms_backend.billing.models import Bill
from hms_backend.core.audit import Actor, record_action
from hms_backend.core.exceptions import (
    InvalidInput,
    InvalidStateTransition,
    MissingReference,
    NotFound,
    StorageError,
)
from hms_backend.patients.models import Patient

logger = logging.getLogger(__name__)


def create_bill(*, patient_id: int, amount: Decimal, using: str = 'default') -> Bill:
    """Insert an Unpaid bill for an existing patient."""
    if amount is None or amount < 0:
        raise InvalidInput('Amount must be zero or greater', fields={'amount': ['Invalid amount.']})

    try:
        with transaction.atomic(using=using):
            if not Patient.objects.using(using).filter(pk=patient_id).exists():
                raise MissingReference(f'Patient {patient_id} does not exist')
            bill = Bill.objects.using(using).create(patient_id=patient_id, amount=amount)
    except DatabaseError as exc:
        logger.exception('Bill creation failed (patient_id=%s)', patient_id)
        raise StorageError('Billing Post Error') from exc

    logger.info('Created bill_id=%s patient_id=%s amount=%s', bill.pk, patient_id, amount)
    return bill


def settle_bill(bill_id: int, *, method: str, actor: Actor, using: str = 'default') -> Bill:
    """Mark an Unpaid bill as Paid with the given payment method.

    Raises:
        InvalidInput: method missing
        NotFound: no such bill
        InvalidStateTransition: bill already Paid (first payment method kept)
        StorageError: datastore failure
    """
    method = (method or '').strip()
    if not method:
        raise InvalidInput('Payment method is required', fields={'method': ['This field is required.']})

    exists = True
    try:
        with transaction.atomic(using=using):
            updated = (
                Bill.objects.using(using)
                .filter(pk=bill_id, status=Bill.STATUS_UNPAID)
                .update(status=Bill.STATUS_PAID, payment_method=method, paid_at=timezone.now())
            )
            if not updated:
                exists = Bill.objects.using(using).filter(pk=bill_id).exists()
    except DatabaseError as exc:
        logger.exception('Payment failed (bill_id=%s)', bill_id)
        raise StorageError('Payment Update Error') from exc

    if not updated:
        if not exists:
            raise NotFound(f'Bill {bill_id} not found')
        logger.warning('Rejected payment for bill_id=%s: already paid', bill_id)
        raise InvalidStateTransition(f'Bill {bill_id} is already paid')

    logger.info('Settled bill_id=%s via %s', bill_id, method)
    record_action(actor, 'Payment', f'Inv #{bill_id}', f'Received via {method}', using=using)
    return Bill.objects.using(using).get(pk=bill_id)
