from datetime import timedelta
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from hms_backend.pharmacy.models import InventoryItem

STOCK = [
    ("Amlodipine 5mg", "AML-2301", 120, "0.40", "1.00", "MedSupply Ltd"),
    ("Amoxicillin 500mg", "AMX-2307", 8, "0.55", "1.50", "MedSupply Ltd"),
    ("Artemether/Lumefantrine 20/120mg", "ART-2311", 60, "2.10", "4.50", "PharmaCorp"),
    ("Paracetamol 500mg", "PAR-2402", 500, "0.05", "0.20", "PharmaCorp"),
    ("Salbutamol Inhaler", "SAL-2312", 4, "3.00", "6.00", "Respira Inc"),
]


def seed_pharmacy(flush: bool = False) -> dict:
    """Seeds inventory batches; two of them start at or below their reorder level."""
    stats: dict[str, int] = {}

    with transaction.atomic():
        if flush:
            InventoryItem.objects.all().delete()

        if InventoryItem.objects.exists():
            stats["inventory_skipped"] = InventoryItem.objects.count()
            return stats

        expiry = timezone.localdate() + timedelta(days=365)
        for name, batch, qty, cost, sale, supplier in STOCK:
            InventoryItem.objects.create(
                medicine_name=name,
                batch_number=batch,
                quantity_on_hand=qty,
                cost_price=Decimal(cost),
                sale_price=Decimal(sale),
                expiration_date=expiry,
                supplier=supplier,
            )
        stats["inventory_items"] = len(STOCK)

    return stats
