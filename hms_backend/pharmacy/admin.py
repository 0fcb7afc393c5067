from django.contrib import admin

from .models import InventoryItem


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = (
        'id',
        'medicine_name',
        'batch_number',
        'quantity_on_hand',
        'reorder_level',
        'expiration_date',
        'supplier',
    )
    search_fields = ('medicine_name', 'batch_number', 'supplier')
    list_filter = ('supplier',)
    ordering = ('medicine_name', 'id')
