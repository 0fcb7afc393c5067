"""Pharmacy App URLs.

Prefix: /api/
Routes:
    GET/POST  /api/inventory/                 - Stock list (optional ?low_stock=true) / Stock entry
    GET       /api/pharmacy/prescriptions/    - Prescriptions queue
    POST      /api/pharmacy/dispense/         - Dispense medication
"""

from django.urls import path

from hms_backend.pharmacy.views import DispenseView, InventoryListCreateView, PrescriptionListView

app_name = 'pharmacy'

urlpatterns = [
    path('inventory/', InventoryListCreateView.as_view(), name='inventory'),
    path('pharmacy/prescriptions/', PrescriptionListView.as_view(), name='prescriptions'),
    path('pharmacy/dispense/', DispenseView.as_view(), name='dispense'),
]
