"""Core app views.

Contains:
- health: datastore connectivity check
- check_tables: reports which clinic tables exist
- LoginView / RegisterView: Access Gate endpoints
- RefreshView: JWT token refresh
- MeView: current user profile and permitted workflows
- AuditLogListView / AuditLogExportView: audit trail
"""

import csv
import logging

from django.conf import settings
from django.db import DatabaseError, connection
from django.db.models import Q
from django.http import HttpResponse, JsonResponse
from django.utils import timezone

from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from rest_framework_simplejwt.tokens import RefreshToken

from hms_backend.core import access
from hms_backend.core.audit import Actor
from hms_backend.core.exceptions import StorageError, WorkflowError, validated_data
from hms_backend.core.models import AuditLog
from hms_backend.core.permissions import CanRegisterUser, WorkflowPermission
from hms_backend.core.serializers import (
    AuditLogSerializer,
    LoginSerializer,
    RefreshSerializer,
    RegisterSerializer,
    UserProfileSerializer,
)
from hms_backend.core.services import authenticate, register_user

logger = logging.getLogger(__name__)

CLINIC_TABLES = [
    'users',
    'patients',
    'medical_records',
    'appointments',
    'billing',
    'audit_logs',
    'medicine_inventory',
]


def health(request):
    """Health check endpoint - no authentication required."""
    timestamp = timezone.now().isoformat()
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1;')
    except DatabaseError:
        logger.exception('Health check could not reach the database')
        return JsonResponse(
            {'status': 'unhealthy', 'database': 'disconnected', 'error': 'StorageError', 'timestamp': timestamp},
            status=503,
        )

    return JsonResponse({'status': 'healthy', 'database': 'connected', 'timestamp': timestamp})


def check_tables(request):
    """Report which of the clinic tables exist - no authentication required."""
    try:
        existing = set(connection.introspection.table_names())
    except DatabaseError:
        logger.exception('Table check could not reach the database')
        error = StorageError()
        return JsonResponse({'success': False, **error.to_dict()}, status=error.status_code)

    tables = {name: name in existing for name in CLINIC_TABLES}
    return JsonResponse({
        'success': True,
        'tables': tables,
        'allTablesExist': all(tables.values()),
    })


class LoginView(APIView):
    """Verify credentials and issue JWT tokens.

    POST /api/login/
    Body: {"username": "...", "password": "..."}
    Returns: {"success": true, "role": "...", "user": {...}, "access": "...", "refresh": "..."}
    Failure: 401 {"success": false, "error": "InvalidCredentials", "detail": "..."}
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        try:
            data = validated_data(LoginSerializer(data=request.data))
            user = authenticate(username=data['username'], password=data['password'])
        except WorkflowError as e:
            return Response({'success': False, **e.to_dict()}, status=e.status_code)

        refresh = RefreshToken.for_user(user)
        refresh['role'] = user.role

        return Response(
            {
                'success': True,
                'role': user.role,
                'user': UserProfileSerializer(user).data,
                'access': str(refresh.access_token),
                'refresh': str(refresh),
            },
            status=status.HTTP_200_OK,
        )


class RegisterView(APIView):
    """Create a staff account.

    POST /api/register/
    Body: {"username": "...", "password": "...", "role": "...", "full_name": "..."}
    Returns: 201 {"success": true, "message": "...", "user": {...}}
    """

    permission_classes = [CanRegisterUser]

    def post(self, request, *args, **kwargs):
        try:
            data = validated_data(RegisterSerializer(data=request.data))
            user = register_user(
                username=data['username'],
                password=data['password'],
                role=data['role'],
                full_name=data.get('full_name', ''),
                actor=Actor.from_request(request) if request.user.is_authenticated else None,
            )
        except WorkflowError as e:
            return Response({'success': False, **e.to_dict()}, status=e.status_code)

        return Response(
            {
                'success': True,
                'message': 'User registered successfully',
                'user': UserProfileSerializer(user).data,
            },
            status=status.HTTP_201_CREATED,
        )


class RefreshView(APIView):
    """Refresh JWT access token.

    POST /api/auth/refresh/
    Body: {"refresh": "..."}
    Returns: {"access": "..."}
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        try:
            data = validated_data(RefreshSerializer(data=request.data))
        except WorkflowError as e:
            return Response(e.to_dict(), status=e.status_code)

        refresh = RefreshToken(data['refresh'])
        return Response({'access': str(refresh.access_token)}, status=status.HTTP_200_OK)


class MeView(APIView):
    """GET /api/auth/me/ - current user profile including permitted workflows."""

    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        return Response(UserProfileSerializer(request.user).data, status=status.HTTP_200_OK)


# Spreadsheets evaluate cells starting with these as formulas.
CSV_FORMULA_PREFIXES = ('=', '+', '-', '@', '\t', '\r')


def _csv_cell(value) -> str:
    value = '' if value is None else str(value)
    if value.startswith(CSV_FORMULA_PREFIXES):
        return "'" + value
    return value


def _search_audit_logs(queryset, q):
    q = (q or '').strip()
    if not q:
        return queryset
    return queryset.filter(
        Q(user_name__icontains=q)
        | Q(action_type__icontains=q)
        | Q(subject__icontains=q)
    )


class AuditLogListView(generics.ListAPIView):
    """Latest audit entries, newest first (page size HMS_AUDIT_PAGE_SIZE).

    GET /api/audit-logs/?q=<search>
    """

    permission_classes = [WorkflowPermission]
    workflows = {'GET': access.VIEW_AUDIT_LOGS}
    serializer_class = AuditLogSerializer

    def get_queryset(self):
        qs = _search_audit_logs(
            AuditLog.objects.using('default').order_by('-action_timestamp', '-id'),
            self.request.query_params.get('q'),
        )
        return qs[: settings.HMS_AUDIT_PAGE_SIZE]


class AuditLogExportView(APIView):
    """Full audit trail as CSV (no row limit).

    GET /api/audit-logs/export/?q=<search>
    """

    permission_classes = [WorkflowPermission]
    workflows = {'GET': access.VIEW_AUDIT_LOGS}

    def get(self, request, *args, **kwargs):
        qs = _search_audit_logs(
            AuditLog.objects.using('default').order_by('-action_timestamp', '-id'),
            request.query_params.get('q'),
        )

        filename = f"HMS_Audit_Log_{timezone.localdate().isoformat()}.csv"
        response = HttpResponse(content_type='text/csv')
        response['Content-Disposition'] = f'attachment; filename="{filename}"'

        writer = csv.writer(response)
        writer.writerow(['Timestamp', 'User', 'Role', 'Action', 'Patient', 'Details'])
        for entry in qs.iterator():
            writer.writerow([
                entry.action_timestamp.isoformat(),
                _csv_cell(entry.user_name),
                _csv_cell(entry.user_role),
                _csv_cell(entry.action_type),
                _csv_cell(entry.subject or 'N/A'),
                _csv_cell(entry.details),
            ])
        return response
