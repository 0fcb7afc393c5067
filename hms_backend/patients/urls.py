"""Patients App URLs - Patients & Medical Records.

Prefix: /api/
Routes:
    GET/POST        /api/patients/               - List/Register patients
    GET/PUT/DELETE  /api/patients/<pk>/          - Retrieve/Update/Delete patient
    GET             /api/patients/<pk>/records/  - Medical history
    GET             /api/patients/<pk>/bills/    - Bills of the patient
    POST            /api/records/                - Record consultation (+ bill)
"""

from django.urls import path

from hms_backend.patients.views import (
    ConsultationCreateView,
    PatientBillListView,
    PatientDetailView,
    PatientListCreateView,
    PatientRecordListView,
)

app_name = 'patients'

urlpatterns = [
    path('patients/', PatientListCreateView.as_view(), name='list'),
    path('patients/<int:pk>/', PatientDetailView.as_view(), name='detail'),
    path('patients/<int:pk>/records/', PatientRecordListView.as_view(), name='records'),
    path('patients/<int:pk>/bills/', PatientBillListView.as_view(), name='bills'),
    path('records/', ConsultationCreateView.as_view(), name='record-create'),
]
