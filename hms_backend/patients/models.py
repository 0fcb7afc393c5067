from django.db import models


class Patient(models.Model):
    """Registered patient.

    Medical records, appointments and bills hang off a patient and are removed
    together with it (see services.delete_patient).
    """

    full_name = models.CharField(max_length=255)
    age = models.PositiveIntegerField(null=True, blank=True)
    gender = models.CharField(max_length=32, blank=True, default='')
    phone = models.CharField(max_length=32, blank=True, default='')
    medical_history = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'patients'
        ordering = ['id']
        verbose_name = 'Patient'
        verbose_name_plural = 'Patients'

    def __str__(self) -> str:
        return f"{self.full_name} (id={self.pk})"


class MedicalRecord(models.Model):
    """One consultation: diagnosis and prescription written by a doctor."""

    patient = models.ForeignKey(
        Patient,
        on_delete=models.CASCADE,
        related_name='medical_records',
    )
    doctor_name = models.CharField(max_length=255, blank=True, default='')
    diagnosis = models.TextField(blank=True, default='')
    prescription = models.TextField(blank=True, default='')
    visit_date = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'medical_records'
        ordering = ['-visit_date', '-id']
        verbose_name = 'Medical Record'
        verbose_name_plural = 'Medical Records'

    def __str__(self) -> str:
        return f"Record #{self.pk} for patient_id={self.patient_id}"
