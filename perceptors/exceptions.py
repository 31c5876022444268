"""
Error kinds raised by the perceptor services and the project-wide DRF
exception handler that renders them.

Every API error leaves the backend as
``{'ok': False, 'error': {'code': ..., 'message': ...}}``; validation
failures additionally carry the full ``errors`` report.
"""
from __future__ import annotations

import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, PermissionDenied
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class ValidationFailed(APIException):
    """Structural or business validation rejected the payload."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'The submitted data is not valid.'
    default_code = 'validation_failed'

    def __init__(self, report, detail=None):
        super().__init__(detail)
        self.report = report


class PerceptorNotFound(NotFound):
    default_detail = 'Perceptor not found.'
    default_code = 'perceptor_not_found'

    def __init__(self, perceptor_id=None):
        detail = f'Perceptor {perceptor_id} not found.' if perceptor_id is not None else None
        super().__init__(detail)
        self.perceptor_id = perceptor_id


class PerceptorForbidden(PermissionDenied):
    default_detail = 'You are not allowed to manage this perceptor.'
    default_code = 'perceptor_forbidden'


class InvalidTransition(APIException):
    """The requested lifecycle operation is not legal from the current status."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The perceptor cannot make this transition.'
    default_code = 'invalid_transition'


class StaleVersion(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The perceptor was modified by someone else; reload and try again.'
    default_code = 'stale_version'


class CollaboratorUnavailable(APIException):
    """Persistence or another backing service failed for this request."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'A backing service is unavailable.'
    default_code = 'collaborator_unavailable'


class CatalogNotFound(Exception):
    """The reference-data service does not know the requested catalog key."""

    def __init__(self, key: str):
        super().__init__(f'catalog {key!r} does not exist')
        self.key = key


class ManagerNotFound(Exception):

    def __init__(self, reference: str):
        super().__init__(f'manager {reference!r} does not exist')
        self.reference = reference


def api_exception_handler(exc, context):
    if isinstance(exc, DatabaseError):
        logger.exception('database failure while handling %s', context.get('view'))
        exc = CollaboratorUnavailable()
    resp = drf_exception_handler(exc, context)
    if resp is None:
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    code = getattr(exc, 'default_code', None) or 'api_error'
    body = {'ok': False, 'error': {'code': code, 'message': detail}}
    if isinstance(exc, ValidationFailed):
        body['errors'] = exc.report.as_list()
    return Response(body, status=resp.status_code, headers=_passthrough_headers(resp))


def _passthrough_headers(resp) -> dict:
    return {k: v for k, v in resp.items() if k in ('WWW-Authenticate', 'Retry-After')}
