"""
Workflow exceptions shared by all clinic apps.

Services raise these; views translate them into DRF responses with
``Response(exc.to_dict(), status=exc.status_code)``. Every payload carries the
error category label and a human-readable detail string.

``api_exception_handler`` (REST_FRAMEWORK['EXCEPTION_HANDLER']) gives failures
raised outside the views the same shape: permission and authentication
errors, parse errors, unsupported methods and datastore errors.
"""

from __future__ import annotations

import logging
from typing import Any

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.db import DatabaseError
from django.http import Http404

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


class WorkflowError(Exception):
    """Base exception for all workflow failures."""

    category = 'WorkflowError'
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'The operation could not be completed.'

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_dict(self) -> dict[str, Any]:
        return {
            'error': self.category,
            'detail': self.detail,
        }


class InvalidInput(WorkflowError):
    """Missing or malformed required field."""

    category = 'ValidationError'
    default_detail = 'Invalid input.'

    def __init__(self, detail: str | None = None, fields: dict | None = None):
        self.fields = fields or {}
        super().__init__(detail)

    @classmethod
    def from_serializer_errors(cls, errors) -> 'InvalidInput':
        names = ', '.join(sorted(errors.keys()))
        return cls(f'Invalid or missing fields: {names}', fields=dict(errors))

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.fields:
            result['fields'] = self.fields
        return result


class MissingReference(WorkflowError):
    """A referenced row (usually the patient) does not exist."""

    category = 'ReferenceError'
    default_detail = 'Referenced record does not exist.'


class NotFound(WorkflowError):
    category = 'NotFound'
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'


class DuplicateUsername(WorkflowError):
    category = 'DuplicateUsername'
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Username already exists'


class InvalidCredentials(WorkflowError):
    """Unknown username or wrong password. The two cases are never distinguished."""

    category = 'InvalidCredentials'
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid username or password'


class InvalidStateTransition(WorkflowError):
    category = 'InvalidStateTransition'
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The record is not in a state that allows this operation.'


class InsufficientStock(WorkflowError):
    category = 'InsufficientStock'
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Not enough stock on hand.'

    def __init__(self, detail: str | None = None, *, available: int | None = None, requested: int | None = None):
        self.available = available
        self.requested = requested
        super().__init__(detail)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.available is not None:
            result['available'] = self.available
        if self.requested is not None:
            result['requested'] = self.requested
        return result


class StorageError(WorkflowError):
    """Underlying datastore failure. Raw driver errors never reach the caller."""

    category = 'StorageError'
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Database error.'


def validated_data(serializer) -> dict[str, Any]:
    """Run serializer validation, raising InvalidInput instead of DRF's ValidationError."""
    if not serializer.is_valid():
        raise InvalidInput.from_serializer_errors(serializer.errors)
    return serializer.validated_data


# Checked in order; the first matching class names the category.
API_ERROR_CATEGORIES = [
    (exceptions.ValidationError, 'ValidationError'),
    (exceptions.ParseError, 'ValidationError'),
    (exceptions.NotAuthenticated, 'Unauthenticated'),
    (exceptions.AuthenticationFailed, 'Unauthenticated'),
    (exceptions.PermissionDenied, 'Forbidden'),
    (DjangoPermissionDenied, 'Forbidden'),
    (exceptions.NotFound, 'NotFound'),
    (Http404, 'NotFound'),
    (exceptions.MethodNotAllowed, 'MethodNotAllowed'),
    (exceptions.NotAcceptable, 'NotAcceptable'),
    (exceptions.UnsupportedMediaType, 'UnsupportedMediaType'),
    (exceptions.Throttled, 'Throttled'),
]


def _category_for(exc) -> str:
    for exc_class, category in API_ERROR_CATEGORIES:
        if isinstance(exc, exc_class):
            return category
    return 'Error'


def api_exception_handler(exc, context):
    """DRF exception handler: every error payload gets ``error`` and ``detail``."""
    if isinstance(exc, WorkflowError):
        return Response(exc.to_dict(), status=exc.status_code)

    if isinstance(exc, DatabaseError):
        view = context.get('view')
        logger.exception('Datastore failure in %s', type(view).__name__ if view else 'unknown view')
        set_rollback()
        error = StorageError()
        return Response(error.to_dict(), status=error.status_code)

    response = exception_handler(exc, context)
    if response is None:
        return None

    category = _category_for(exc)
    data = response.data
    if isinstance(exc, exceptions.ValidationError):
        fields = data if isinstance(data, dict) else {'non_field_errors': data}
        payload = InvalidInput(fields=fields).to_dict()
    elif isinstance(data, dict) and 'detail' in data:
        payload = {'error': category, 'detail': str(data['detail'])}
    else:
        payload = {'error': category, 'detail': str(data)}

    response.data = payload
    return response
