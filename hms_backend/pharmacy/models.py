from django.db import models


class InventoryItem(models.Model):
    """One stock batch of a medicine.

    Each stock entry is its own row; batches of the same medicine are not
    merged. quantity_on_hand never goes below zero (dispensing uses a
    conditional decrement).
    """

    medicine_name = models.CharField(max_length=255, db_index=True)
    batch_number = models.CharField(max_length=100)
    quantity_on_hand = models.PositiveIntegerField(default=0)
    cost_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    sale_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    expiration_date = models.DateField(null=True, blank=True)
    supplier = models.CharField(max_length=255, blank=True, default='')
    reorder_level = models.PositiveIntegerField(default=10)

    class Meta:
        db_table = 'medicine_inventory'
        ordering = ['medicine_name', 'id']
        verbose_name = 'Inventory Item'
        verbose_name_plural = 'Inventory Items'

    def __str__(self) -> str:
        return f"{self.medicine_name} [{self.batch_number}] x{self.quantity_on_hand}"

    @property
    def is_low_stock(self) -> bool:
        return self.quantity_on_hand <= self.reorder_level
