from rest_framework import serializers

from hms_backend.patients.models import MedicalRecord, Patient


class PatientReadSerializer(serializers.ModelSerializer):
    """Read-only serializer with all fields."""

    class Meta:
        model = Patient
        fields = [
            'id',
            'full_name',
            'age',
            'gender',
            'phone',
            'medical_history',
            'created_at',
        ]
        read_only_fields = fields


class PatientCreateSerializer(serializers.Serializer):
    """Input for RegisterPatient.

    Field names follow the dashboard form: name/history map to
    full_name/medical_history.
    """

    name = serializers.CharField(max_length=255)
    age = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    gender = serializers.CharField(max_length=32, required=False, allow_blank=True, default='')
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default='')
    history = serializers.CharField(required=False, allow_blank=True, default='')


class PatientUpdateSerializer(serializers.Serializer):
    """Input for UpdatePatient: name, age and phone are replaced."""

    name = serializers.CharField(max_length=255)
    age = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default='')


class MedicalRecordReadSerializer(serializers.ModelSerializer):
    patient_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = MedicalRecord
        fields = [
            'id',
            'patient_id',
            'doctor_name',
            'diagnosis',
            'prescription',
            'visit_date',
        ]
        read_only_fields = fields


class ConsultationSerializer(serializers.Serializer):
    """Input for RecordConsultation."""

    patient_id = serializers.IntegerField(min_value=1)
    doctor_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    diagnosis = serializers.CharField(required=False, allow_blank=True, default='')
    prescription = serializers.CharField(required=False, allow_blank=True, default='')


class PrescriptionSerializer(serializers.ModelSerializer):
    """Medical record joined with the patient's name and phone (pharmacy queue)."""

    patient_id = serializers.IntegerField(read_only=True)
    full_name = serializers.CharField(source='patient.full_name', read_only=True)
    phone = serializers.CharField(source='patient.phone', read_only=True)

    class Meta:
        model = MedicalRecord
        fields = [
            'id',
            'patient_id',
            'full_name',
            'phone',
            'doctor_name',
            'diagnosis',
            'prescription',
            'visit_date',
        ]
        read_only_fields = fields
