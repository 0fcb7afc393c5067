from django.db.models import F

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from hms_backend.core import access
from hms_backend.core.audit import Actor
from hms_backend.core.exceptions import WorkflowError, validated_data
from hms_backend.core.permissions import WorkflowPermission
from hms_backend.patients.models import MedicalRecord
from hms_backend.patients.serializers import PrescriptionSerializer
from hms_backend.pharmacy.models import InventoryItem
from hms_backend.pharmacy.serializers import (
    DispenseSerializer,
    InventoryItemSerializer,
    StockEntrySerializer,
)
from hms_backend.pharmacy.services import add_inventory_stock, dispense_medication

TRUTHY = {'1', 'true', 'yes', 'on'}


class InventoryListCreateView(generics.ListAPIView):
    """List stock ordered by medicine name or add a stock entry.

    GET /api/inventory/?low_stock=true returns rows at or below their reorder level.
    """

    permission_classes = [WorkflowPermission]
    workflows = {'GET': access.VIEW_INVENTORY, 'POST': access.ADD_INVENTORY_STOCK}
    serializer_class = InventoryItemSerializer

    def get_queryset(self):
        qs = InventoryItem.objects.using('default').order_by('medicine_name', 'id')
        if (self.request.query_params.get('low_stock') or '').strip().lower() in TRUTHY:
            qs = qs.filter(quantity_on_hand__lte=F('reorder_level'))
        return qs

    def post(self, request, *args, **kwargs):
        try:
            data = validated_data(StockEntrySerializer(data=request.data))
            item = add_inventory_stock(
                medicine_name=data['name'],
                batch_number=data['batch'],
                quantity=data['qty'],
                cost_price=data.get('cost'),
                sale_price=data.get('sale'),
                expiration_date=data.get('expiry'),
                supplier=data.get('supplier', ''),
                reorder_level=data.get('reorder_level'),
                actor=Actor.from_request(request),
            )
        except WorkflowError as e:
            return Response(e.to_dict(), status=e.status_code)

        return Response(InventoryItemSerializer(item).data, status=status.HTTP_201_CREATED)


class PrescriptionListView(generics.ListAPIView):
    """GET /api/pharmacy/prescriptions/ - records with a prescription, newest first."""

    permission_classes = [WorkflowPermission]
    workflows = {'GET': access.VIEW_PRESCRIPTIONS}
    serializer_class = PrescriptionSerializer

    def get_queryset(self):
        return (
            MedicalRecord.objects.using('default')
            .select_related('patient')
            .exclude(prescription='')
            .order_by('-visit_date', '-id')
        )


class DispenseView(APIView):
    """POST /api/pharmacy/dispense/ - take units off an inventory row."""

    permission_classes = [WorkflowPermission]
    workflows = {'POST': access.DISPENSE_MEDICATION}

    def post(self, request, *args, **kwargs):
        try:
            data = validated_data(DispenseSerializer(data=request.data))
            item = dispense_medication(
                item_id=data['item_id'],
                quantity=data['quantity'],
                record_id=data.get('record_id'),
                actor=Actor.from_request(request),
            )
        except WorkflowError as e:
            return Response(e.to_dict(), status=e.status_code)

        return Response(
            {'message': 'Medication dispensed', 'data': InventoryItemSerializer(item).data},
            status=status.HTTP_200_OK,
        )
