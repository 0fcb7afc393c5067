from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from hms_backend.billing.models import Bill
from hms_backend.billing.serializers import BillReadSerializer
from hms_backend.core import access
from hms_backend.core.audit import Actor
from hms_backend.core.exceptions import NotFound, WorkflowError, validated_data
from hms_backend.core.permissions import WorkflowPermission
from hms_backend.patients.models import MedicalRecord, Patient
from hms_backend.patients.serializers import (
    ConsultationSerializer,
    MedicalRecordReadSerializer,
    PatientCreateSerializer,
    PatientReadSerializer,
    PatientUpdateSerializer,
)
from hms_backend.patients.services import (
    delete_patient,
    record_consultation,
    register_patient,
    update_patient,
)


class PatientListCreateView(generics.ListAPIView):
    """List all patients or register a new patient."""

    permission_classes = [WorkflowPermission]
    workflows = {'GET': access.VIEW_PATIENTS, 'POST': access.REGISTER_PATIENT}
    serializer_class = PatientReadSerializer

    def get_queryset(self):
        return Patient.objects.using('default').order_by('id')

    def post(self, request, *args, **kwargs):
        try:
            data = validated_data(PatientCreateSerializer(data=request.data))
            patient = register_patient(
                full_name=data['name'],
                age=data.get('age'),
                gender=data.get('gender', ''),
                phone=data.get('phone', ''),
                medical_history=data.get('history', ''),
                actor=Actor.from_request(request),
            )
        except WorkflowError as e:
            return Response(e.to_dict(), status=e.status_code)

        return Response(PatientReadSerializer(patient).data, status=status.HTTP_201_CREATED)


class PatientDetailView(APIView):
    """Retrieve, update or delete a patient."""

    permission_classes = [WorkflowPermission]
    workflows = {
        'GET': access.VIEW_PATIENTS,
        'PUT': access.UPDATE_PATIENT,
        'DELETE': access.DELETE_PATIENT,
    }

    def get(self, request, pk, *args, **kwargs):
        patient = Patient.objects.using('default').filter(pk=pk).first()
        if patient is None:
            e = NotFound(f'Patient {pk} not found')
            return Response(e.to_dict(), status=e.status_code)
        return Response(PatientReadSerializer(patient).data, status=status.HTTP_200_OK)

    def put(self, request, pk, *args, **kwargs):
        try:
            data = validated_data(PatientUpdateSerializer(data=request.data))
            patient = update_patient(
                pk,
                full_name=data['name'],
                age=data.get('age'),
                phone=data.get('phone', ''),
                actor=Actor.from_request(request),
            )
        except WorkflowError as e:
            return Response(e.to_dict(), status=e.status_code)

        return Response(
            {'message': 'Update Successful', 'data': PatientReadSerializer(patient).data},
            status=status.HTTP_200_OK,
        )

    def delete(self, request, pk, *args, **kwargs):
        try:
            removed = delete_patient(pk, actor=Actor.from_request(request))
        except WorkflowError as e:
            return Response(e.to_dict(), status=e.status_code)

        return Response(
            {'message': 'Patient deleted successfully', 'removed': removed},
            status=status.HTTP_200_OK,
        )


class PatientRecordListView(generics.ListAPIView):
    """Medical history of one patient, newest first."""

    permission_classes = [WorkflowPermission]
    workflows = {'GET': access.VIEW_RECORDS}
    serializer_class = MedicalRecordReadSerializer

    def get_queryset(self):
        return (
            MedicalRecord.objects.using('default')
            .filter(patient_id=self.kwargs['pk'])
            .order_by('-visit_date', '-id')
        )


class PatientBillListView(generics.ListAPIView):
    """Bills of one patient, newest first."""

    permission_classes = [WorkflowPermission]
    workflows = {'GET': access.VIEW_BILLING}
    serializer_class = BillReadSerializer

    def get_queryset(self):
        return (
            Bill.objects.using('default')
            .filter(patient_id=self.kwargs['pk'])
            .order_by('-billing_date', '-id')
        )


class ConsultationCreateView(APIView):
    """POST /api/records/ - record a consultation (creates the consultation bill)."""

    permission_classes = [WorkflowPermission]
    workflows = {'POST': access.RECORD_CONSULTATION}

    def post(self, request, *args, **kwargs):
        try:
            data = validated_data(ConsultationSerializer(data=request.data))
            record, bill = record_consultation(
                patient_id=data['patient_id'],
                doctor_name=data.get('doctor_name', ''),
                diagnosis=data.get('diagnosis', ''),
                prescription=data.get('prescription', ''),
                actor=Actor.from_request(request),
            )
        except WorkflowError as e:
            return Response(e.to_dict(), status=e.status_code)

        out = MedicalRecordReadSerializer(record).data
        out['bill'] = BillReadSerializer(bill).data
        return Response(out, status=status.HTTP_201_CREATED)
