"""Billing App URLs.

Prefix: /api/
Routes:
    POST  /api/billing/            - Manual invoice
    GET   /api/billing/all/        - All bills with patient name
    PUT   /api/billing/<pk>/pay/   - Settle bill
"""

from django.urls import path

from hms_backend.billing.views import BillCreateView, BillListAllView, BillPayView

app_name = 'billing'

urlpatterns = [
    path('billing/', BillCreateView.as_view(), name='create'),
    path('billing/all/', BillListAllView.as_view(), name='all'),
    path('billing/<int:pk>/pay/', BillPayView.as_view(), name='pay'),
]
