"""Appointments App URLs.

Prefix: /api/
Routes:
    GET/POST  /api/appointments/  - List (optional ?date=) / Schedule
"""

from django.urls import path

from hms_backend.appointments.views import AppointmentListCreateView

app_name = 'appointments'

urlpatterns = [
    path('appointments/', AppointmentListCreateView.as_view(), name='list'),
]
