from rest_framework import serializers

from hms_backend.appointments.models import Appointment


class AppointmentReadSerializer(serializers.ModelSerializer):
    """Appointment joined with the patient's name."""

    patient_id = serializers.IntegerField(read_only=True)
    full_name = serializers.CharField(source='patient.full_name', read_only=True)

    class Meta:
        model = Appointment
        fields = [
            'id',
            'patient_id',
            'full_name',
            'appointment_date',
            'appointment_time',
            'reason',
            'created_at',
        ]
        read_only_fields = fields


class AppointmentCreateSerializer(serializers.Serializer):
    """Input for ScheduleAppointment (dashboard form field names)."""

    patient_id = serializers.IntegerField(min_value=1)
    date = serializers.DateField()
    time = serializers.TimeField()
    reason = serializers.CharField(required=False, allow_blank=True, default='')
