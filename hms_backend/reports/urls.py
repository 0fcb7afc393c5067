"""Reports App URLs.

Prefix: /api/
Routes:
    GET  /api/reports/daily-summary/  - Today's patients, appointments, revenue
"""

from django.urls import path

from hms_backend.reports.views import DailySummaryView

app_name = 'reports'

urlpatterns = [
    path('reports/daily-summary/', DailySummaryView.as_view(), name='daily-summary'),
]
