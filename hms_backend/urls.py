"""HMS backend URL Configuration.

API routes:
    /api/health/, /api/login/, /api/register/, /api/auth/, /api/audit-logs/  - core
    /api/patients/, /api/records/                                           - patients
    /api/appointments/                                                      - appointments
    /api/billing/                                                           - billing
    /api/inventory/, /api/pharmacy/                                         - pharmacy
    /api/reports/                                                           - reports
"""

from django.contrib import admin
from django.http import HttpResponse
from django.urls import include, path


def root(request):
    """Plain-text liveness response for the bare host."""
    return HttpResponse("HMS backend is running.")


urlpatterns = [
    path("", root, name="root"),
    path("admin/", admin.site.urls),

    path("api/", include("hms_backend.core.urls")),
    path("api/", include("hms_backend.patients.urls")),
    path("api/", include("hms_backend.appointments.urls")),
    path("api/", include("hms_backend.billing.urls")),
    path("api/", include("hms_backend.pharmacy.urls")),
    path("api/", include("hms_backend.reports.urls")),
]
