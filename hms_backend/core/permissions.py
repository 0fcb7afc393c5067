"""Core permissions for RBAC (Role-Based Access Control).

Views declare which workflow each HTTP method invokes; the permission looks the
caller's role up in ``core.access.ROLE_WORKFLOWS``.

Example:
    class PatientListCreateView(generics.ListCreateAPIView):
        permission_classes = [WorkflowPermission]
        workflows = {'GET': access.VIEW_PATIENTS, 'POST': access.REGISTER_PATIENT}
"""

from django.contrib.auth import get_user_model
from rest_framework.permissions import BasePermission

from . import access


class WorkflowPermission(BasePermission):
    """Allow a request only if the caller's role permits the view's workflow.

    Methods missing from ``view.workflows`` are denied; HEAD falls back to GET.
    """

    message = 'Your role does not permit this operation.'

    def _workflow_for(self, request, view):
        workflows = getattr(view, 'workflows', None) or {}
        method = request.method
        if method == 'HEAD':
            method = 'GET'
        return workflows.get(method)

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        if not user or not user.is_authenticated:
            return False

        if request.method == 'OPTIONS':
            return True

        workflow = self._workflow_for(request, view)
        if workflow is None:
            return False

        return access.is_permitted(getattr(user, 'role', None), workflow)


class CanRegisterUser(BasePermission):
    """Registration is open until the first account exists; then Admin only."""

    message = 'Only administrators can register new users.'

    def has_permission(self, request, view):
        if not get_user_model().objects.using('default').exists():
            return True

        user = getattr(request, 'user', None)
        if not user or not user.is_authenticated:
            return False
        return access.is_permitted(getattr(user, 'role', None), access.REGISTER_USER)
