from datetime import date

from rest_framework import generics, status
from rest_framework.response import Response

from hms_backend.appointments.models import Appointment
from hms_backend.appointments.serializers import (
    AppointmentCreateSerializer,
    AppointmentReadSerializer,
)
from hms_backend.appointments.services import schedule_appointment
from hms_backend.core import access
from hms_backend.core.exceptions import InvalidInput, WorkflowError, validated_data
from hms_backend.core.permissions import WorkflowPermission


def _parse_date_param(value):
    """Parse an optional ?date=YYYY-MM-DD query parameter."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidInput('Date must be in format YYYY-MM-DD.', fields={'date': [value]})


class AppointmentListCreateView(generics.ListAPIView):
    """List appointments (ordered by date, then time) or schedule a new one.

    GET /api/appointments/?date=YYYY-MM-DD narrows the list to one day's queue.
    """

    permission_classes = [WorkflowPermission]
    workflows = {'GET': access.VIEW_APPOINTMENTS, 'POST': access.SCHEDULE_APPOINTMENT}
    serializer_class = AppointmentReadSerializer

    def get_queryset(self):
        qs = (
            Appointment.objects.using('default')
            .select_related('patient')
            .order_by('appointment_date', 'appointment_time', 'id')
        )
        day = _parse_date_param(self.request.query_params.get('date'))
        if day is not None:
            qs = qs.filter(appointment_date=day)
        return qs

    def list(self, request, *args, **kwargs):
        try:
            return super().list(request, *args, **kwargs)
        except InvalidInput as e:
            return Response(e.to_dict(), status=e.status_code)

    def post(self, request, *args, **kwargs):
        try:
            data = validated_data(AppointmentCreateSerializer(data=request.data))
            appointment = schedule_appointment(
                patient_id=data['patient_id'],
                appointment_date=data['date'],
                appointment_time=data['time'],
                reason=data.get('reason', ''),
            )
        except WorkflowError as e:
            return Response(e.to_dict(), status=e.status_code)

        return Response(AppointmentReadSerializer(appointment).data, status=status.HTTP_201_CREATED)
