from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from hms_backend.billing.models import Bill
from hms_backend.billing.serializers import (
    BillCreateSerializer,
    BillReadSerializer,
    BillWithPatientSerializer,
    PaymentSerializer,
)
from hms_backend.billing.services import create_bill, settle_bill
from hms_backend.core import access
from hms_backend.core.audit import Actor
from hms_backend.core.exceptions import WorkflowError, validated_data
from hms_backend.core.permissions import WorkflowPermission


class BillCreateView(APIView):
    """POST /api/billing/ - manual invoice for an existing patient."""

    permission_classes = [WorkflowPermission]
    workflows = {'POST': access.CREATE_BILL}

    def post(self, request, *args, **kwargs):
        try:
            data = validated_data(BillCreateSerializer(data=request.data))
            bill = create_bill(patient_id=data['patient_id'], amount=data['amount'])
        except WorkflowError as e:
            return Response(e.to_dict(), status=e.status_code)

        return Response(BillReadSerializer(bill).data, status=status.HTTP_201_CREATED)


class BillListAllView(generics.ListAPIView):
    """GET /api/billing/all/ - every bill joined with the patient's name, newest first."""

    permission_classes = [WorkflowPermission]
    workflows = {'GET': access.VIEW_BILLING}
    serializer_class = BillWithPatientSerializer

    def get_queryset(self):
        return (
            Bill.objects.using('default')
            .select_related('patient')
            .order_by('-billing_date', '-id')
        )


class BillPayView(APIView):
    """PUT /api/billing/<pk>/pay/ - settle an Unpaid bill."""

    permission_classes = [WorkflowPermission]
    workflows = {'PUT': access.SETTLE_BILL}

    def put(self, request, pk, *args, **kwargs):
        try:
            data = validated_data(PaymentSerializer(data=request.data))
            bill = settle_bill(pk, method=data['method'], actor=Actor.from_request(request))
        except WorkflowError as e:
            return Response(e.to_dict(), status=e.status_code)

        return Response(
            {'message': 'Payment successful', 'data': BillReadSerializer(bill).data},
            status=status.HTTP_200_OK,
        )
