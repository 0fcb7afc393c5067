"""
Pharmacy workflows: stock entry and dispensing.

Stock entries are inserted as submitted; two deliveries of the same medicine
stay two rows. Dispensing decrements one row with a single conditional
UPDATE (``quantity_on_hand >= quantity``), so stock never goes negative and
concurrent dispenses of the last units cannot both succeed.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from django.db import DatabaseError, transaction
from django.db.models import F

from hms_backend.core.audit import Actor, record_action
from hms_backend.core.exceptions import (
    InsufficientStock,
    InvalidInput,
    MissingReference,
    NotFound,
    StorageError,
)
from hms_backend.patients.models import MedicalRecord
from hms_backend.pharmacy.models import InventoryItem

logger = logging.getLogger(__name__)


def add_inventory_stock(
    *,
    medicine_name: str,
    batch_number: str,
    quantity: int,
    cost_price: Decimal | None = None,
    sale_price: Decimal | None = None,
    expiration_date: date | None = None,
    supplier: str = '',
    reorder_level: int | None = None,
    actor: Actor,
    using: str = 'default',
) -> InventoryItem:
    """Insert one stock row and audit it as ``Stock Entry``."""
    medicine_name = (medicine_name or '').strip()
    batch_number = (batch_number or '').strip()
    errors = {}
    if not medicine_name:
        errors['name'] = ['This field is required.']
    if not batch_number:
        errors['batch'] = ['This field is required.']
    if quantity is None or quantity < 0:
        errors['qty'] = ['Quantity must be zero or greater.']
    if errors:
        raise InvalidInput.from_serializer_errors(errors)

    fields = {
        'medicine_name': medicine_name,
        'batch_number': batch_number,
        'quantity_on_hand': quantity,
        'cost_price': cost_price,
        'sale_price': sale_price,
        'expiration_date': expiration_date,
        'supplier': supplier or '',
    }
    if reorder_level is not None:
        fields['reorder_level'] = reorder_level

    try:
        with transaction.atomic(using=using):
            item = InventoryItem.objects.using(using).create(**fields)
    except DatabaseError as exc:
        logger.exception('Stock entry failed (medicine=%s)', medicine_name)
        raise StorageError('Error adding medicine') from exc

    logger.info('Stock entry item_id=%s medicine=%s qty=%s', item.pk, medicine_name, quantity)
    record_action(actor, 'Stock Entry', medicine_name, f'Added {quantity} units', using=using)
    return item


def dispense_medication(
    *,
    item_id: int,
    quantity: int,
    actor: Actor,
    record_id: int | None = None,
    using: str = 'default',
) -> InventoryItem:
    """Take ``quantity`` units off one inventory row.

    Raises:
        InvalidInput: quantity below 1
        NotFound: no such inventory row
        MissingReference: record_id given but no such medical record
        InsufficientStock: fewer units on hand than requested (nothing changed)
        StorageError: datastore failure
    """
    if quantity is None or quantity < 1:
        raise InvalidInput('Quantity must be at least 1', fields={'quantity': ['Ensure this value is greater than or equal to 1.']})

    item = None
    try:
        with transaction.atomic(using=using):
            if record_id is not None and not MedicalRecord.objects.using(using).filter(pk=record_id).exists():
                raise MissingReference(f'Medical record {record_id} does not exist')

            updated = (
                InventoryItem.objects.using(using)
                .filter(pk=item_id, quantity_on_hand__gte=quantity)
                .update(quantity_on_hand=F('quantity_on_hand') - quantity)
            )
            item = InventoryItem.objects.using(using).filter(pk=item_id).first()
    except DatabaseError as exc:
        logger.exception('Dispense failed (item_id=%s)', item_id)
        raise StorageError('Dispense Error') from exc

    if item is None:
        raise NotFound(f'Inventory item {item_id} not found')
    if not updated:
        logger.warning(
            'Rejected dispense for item_id=%s: requested=%s available=%s',
            item_id,
            quantity,
            item.quantity_on_hand,
        )
        raise InsufficientStock(
            f'Only {item.quantity_on_hand} units of {item.medicine_name} on hand',
            available=item.quantity_on_hand,
            requested=quantity,
        )

    details = f'Dispensed {quantity} units (batch {item.batch_number})'
    if record_id is not None:
        details += f' for record #{record_id}'
    logger.info('Dispensed item_id=%s qty=%s remaining=%s', item_id, quantity, item.quantity_on_hand)
    record_action(actor, 'Dispense', item.medicine_name, details, using=using)
    return item
