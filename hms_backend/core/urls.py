"""Core App URLs - Authentication, Audit & Health.

Prefix: /api/
Routes:
    GET  /api/health/               - Health check (no auth)
    GET  /api/setup/check-tables/   - Table existence check (no auth)
    POST /api/login/                - Verify credentials, issue JWT tokens
    POST /api/register/             - Create a staff account
    POST /api/auth/refresh/         - JWT token refresh
    GET  /api/auth/me/              - Current user info (requires auth)
    GET  /api/audit-logs/           - Latest audit entries
    GET  /api/audit-logs/export/    - Audit trail as CSV
"""

from django.urls import path

from hms_backend.core.views import (
    AuditLogExportView,
    AuditLogListView,
    check_tables,
    health,
    LoginView,
    MeView,
    RefreshView,
    RegisterView,
)

app_name = 'core'

urlpatterns = [
    # Health check
    path('health/', health, name='health'),
    path('setup/check-tables/', check_tables, name='check-tables'),

    # Access Gate
    path('login/', LoginView.as_view(), name='login'),
    path('register/', RegisterView.as_view(), name='register'),
    path('auth/refresh/', RefreshView.as_view(), name='refresh'),
    path('auth/me/', MeView.as_view(), name='me'),

    # Audit trail
    path('audit-logs/', AuditLogListView.as_view(), name='audit-logs'),
    path('audit-logs/export/', AuditLogExportView.as_view(), name='audit-logs-export'),
]
