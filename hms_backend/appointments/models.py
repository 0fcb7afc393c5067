from django.db import models


class Appointment(models.Model):
    """Scheduled visit. Several appointments may share date, time and patient."""

    patient = models.ForeignKey(
        'patients.Patient',
        on_delete=models.CASCADE,
        related_name='appointments',
    )
    appointment_date = models.DateField(db_index=True)
    appointment_time = models.TimeField()
    reason = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'appointments'
        ordering = ['appointment_date', 'appointment_time', 'id']
        verbose_name = 'Appointment'
        verbose_name_plural = 'Appointments'

    def __str__(self) -> str:
        return f"{self.appointment_date} {self.appointment_time} patient_id={self.patient_id}"
