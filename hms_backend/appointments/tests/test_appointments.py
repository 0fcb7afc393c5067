from __future__ import annotations

from datetime import date, time

from django.test import TestCase

from rest_framework.test import APIClient

from hms_backend.appointments.models import Appointment
from hms_backend.core.models import AuditLog, User
from hms_backend.patients.models import Patient


class AppointmentAPITest(TestCase):
    """Tests for /api/appointments/.

    RBAC: admin and receptionist schedule; doctor reads; pharmacist has no access.
    """

    databases = {"default"}

    def setUp(self):
        self.receptionist = User.objects.db_manager("default").create_user(
            username="reception_appt_test",
            password="DummyPass123!",
            role="Receptionist",
        )
        self.doctor = User.objects.db_manager("default").create_user(
            username="doctor_appt_test",
            password="DummyPass123!",
            role="Doctor",
        )
        self.pharmacist = User.objects.db_manager("default").create_user(
            username="pharma_appt_test",
            password="DummyPass123!",
            role="Pharmacist",
        )
        self.patient = Patient.objects.using("default").create(full_name="Ama Owusu")

    def _client_for(self, user: User) -> APIClient:
        client = APIClient()
        client.defaults["HTTP_HOST"] = "localhost"
        client.force_authenticate(user=user)
        return client

    def _create(self, day, at, reason=""):
        return Appointment.objects.using("default").create(
            patient=self.patient,
            appointment_date=day,
            appointment_time=at,
            reason=reason,
        )

    def test_schedule_appointment(self):
        response = self._client_for(self.receptionist).post(
            "/api/appointments/",
            {"patient_id": self.patient.id, "date": "2024-01-02", "time": "09:30", "reason": "Follow-up"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["full_name"], "Ama Owusu")

        appointment = Appointment.objects.using("default").get()
        self.assertEqual(appointment.appointment_date, date(2024, 1, 2))
        self.assertEqual(appointment.appointment_time, time(9, 30))
        # Scheduling is not audited.
        self.assertEqual(AuditLog.objects.using("default").count(), 0)

    def test_schedule_for_missing_patient_returns_reference_error(self):
        response = self._client_for(self.receptionist).post(
            "/api/appointments/",
            {"patient_id": 99999, "date": "2024-01-02", "time": "09:30"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "ReferenceError")
        self.assertEqual(Appointment.objects.using("default").count(), 0)

    def test_schedule_invalid_time_returns_validation_error(self):
        response = self._client_for(self.receptionist).post(
            "/api/appointments/",
            {"patient_id": self.patient.id, "date": "2024-01-02", "time": "half past nine"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("time", response.data["fields"])

    def test_double_booking_is_allowed(self):
        client = self._client_for(self.receptionist)
        payload = {"patient_id": self.patient.id, "date": "2024-01-02", "time": "09:30"}

        client.post("/api/appointments/", payload, format="json")
        response = client.post("/api/appointments/", payload, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(Appointment.objects.using("default").count(), 2)

    def test_list_ordered_by_date_then_time(self):
        late = self._create(date(2024, 1, 2), time(15, 0))
        early = self._create(date(2024, 1, 2), time(8, 0))
        previous_day = self._create(date(2024, 1, 1), time(17, 0))

        response = self._client_for(self.doctor).get("/api/appointments/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual([a["id"] for a in response.data], [previous_day.id, early.id, late.id])
        self.assertEqual(response.data[0]["full_name"], "Ama Owusu")

    def test_list_filtered_by_date(self):
        self._create(date(2024, 1, 1), time(8, 0))
        wanted = self._create(date(2024, 1, 2), time(8, 0))

        response = self._client_for(self.receptionist).get("/api/appointments/", {"date": "2024-01-02"})

        self.assertEqual([a["id"] for a in response.data], [wanted.id])

    def test_list_with_malformed_date_returns_400(self):
        response = self._client_for(self.receptionist).get("/api/appointments/", {"date": "02/01/2024"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "ValidationError")

    def test_schedule_as_doctor_forbidden(self):
        response = self._client_for(self.doctor).post(
            "/api/appointments/",
            {"patient_id": self.patient.id, "date": "2024-01-02", "time": "09:30"},
            format="json",
        )

        self.assertEqual(response.status_code, 403)

    def test_list_as_pharmacist_forbidden(self):
        response = self._client_for(self.pharmacist).get("/api/appointments/")

        self.assertEqual(response.status_code, 403)
