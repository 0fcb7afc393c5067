from decimal import Decimal

from rest_framework import serializers

from hms_backend.billing.models import Bill


class BillReadSerializer(serializers.ModelSerializer):
    patient_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Bill
        fields = [
            'id',
            'patient_id',
            'amount',
            'status',
            'payment_method',
            'billing_date',
            'paid_at',
        ]
        read_only_fields = fields


class BillWithPatientSerializer(BillReadSerializer):
    """Bill joined with the patient's name (front-desk billing list)."""

    full_name = serializers.CharField(source='patient.full_name', read_only=True)

    class Meta(BillReadSerializer.Meta):
        fields = BillReadSerializer.Meta.fields + ['full_name']
        read_only_fields = fields


class BillCreateSerializer(serializers.Serializer):
    patient_id = serializers.IntegerField(min_value=1)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.00'))


class PaymentSerializer(serializers.Serializer):
    method = serializers.CharField(max_length=64)
