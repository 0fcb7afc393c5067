from decimal import Decimal

from rest_framework import serializers

from hms_backend.pharmacy.models import InventoryItem


class InventoryItemSerializer(serializers.ModelSerializer):
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryItem
        fields = [
            'id',
            'medicine_name',
            'batch_number',
            'quantity_on_hand',
            'cost_price',
            'sale_price',
            'expiration_date',
            'supplier',
            'reorder_level',
            'is_low_stock',
        ]
        read_only_fields = fields


class StockEntrySerializer(serializers.Serializer):
    """Input for AddInventoryStock (dashboard form field names)."""

    name = serializers.CharField(max_length=255)
    batch = serializers.CharField(max_length=100)
    qty = serializers.IntegerField(min_value=0)
    cost = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0.00'), required=False, allow_null=True
    )
    sale = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0.00'), required=False, allow_null=True
    )
    expiry = serializers.DateField(required=False, allow_null=True)
    supplier = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    reorder_level = serializers.IntegerField(min_value=0, required=False, allow_null=True)


class DispenseSerializer(serializers.Serializer):
    item_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)
    record_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
