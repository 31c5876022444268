"""
Hospital maintenance endpoints.

Each view builds the caller context from the authenticated user, calls
one :class:`HospitalService` operation and renders its result.  Domain
errors (not found, forbidden, invalid transition, validation failed)
propagate as exceptions and are rendered by the project exception
handler.  The ``.../validation`` endpoints are the live form feedback
checks: 200 when the payload is clean, 400 with the report otherwise,
and never any change.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Perceptor
from ..permissions import IsStaffRole
from ..services.hospitals import HospitalService, OperationResult
from ..services.security import SecurityService, build_caller_context


def _caller(request):
    return build_caller_context(SecurityService(request.user))


def _serialize(perceptor: Perceptor) -> dict:
    return {
        'category': perceptor.category,
        'code': perceptor.code,
        'id': str(perceptor.perceptor_id),
        'name': perceptor.name,
        'priority': perceptor.priority,
        'specialty': perceptor.specialty,
        'activity': perceptor.activity,
        'lineOfBusiness': perceptor.line_of_business,
        'status': perceptor.status,
        'manager': perceptor.manager_id,
        'details': perceptor.details,
        'version': perceptor.version,
        'createdAt': perceptor.created_at.isoformat() if perceptor.created_at else None,
        'updatedAt': perceptor.updated_at.isoformat() if perceptor.updated_at else None,
    }


def _catalogs(result: OperationResult) -> dict:
    return {key: [{'code': c.code, 'label': c.label} for c in codes] for key, codes in result.catalogs.items()}


def _report_response(report) -> Response:
    if report.has_errors:
        return Response({'ok': False, 'errors': report.as_list()}, status=status.HTTP_400_BAD_REQUEST)
    return Response({'ok': True, 'errors': []})


def _entity_response(result: OperationResult, code=status.HTTP_200_OK) -> Response:
    return Response({'ok': True, 'message': result.message, 'data': _serialize(result.entity)}, status=code)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffRole])
def hospital_list_form(request):
    """Initial search screen: default criteria and dropdown data."""
    result = HospitalService().list_form(_caller(request))
    return Response({'ok': True, 'criteria': result.form, 'catalogs': _catalogs(result), 'data': []})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def hospital_search_validation(request):
    return _report_response(HospitalService().search_check_only(request.data))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def hospital_search(request):
    result = HospitalService().search(request.data, _caller(request))
    return Response({
        'ok': True,
        'criteria': result.form,
        'catalogs': _catalogs(result),
        'data': [_serialize(p) for p in result.entities],
        'total': len(result.entities),
    })


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def hospital_new(request):
    """GET returns the blank form, POST creates the hospital."""
    service = HospitalService()
    caller = _caller(request)
    if request.method == 'GET':
        result = service.new_form(caller)
        return Response({'ok': True, 'action': result.action, 'data': result.form, 'catalogs': _catalogs(result)})
    return _entity_response(service.create(request.data, caller), code=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def hospital_new_validation(request):
    return _report_response(HospitalService().create_check_only(request.data, _caller(request)))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def hospital_edit(request, category: str, code: int):
    """GET returns the edit form, POST saves it."""
    service = HospitalService()
    caller = _caller(request)
    if request.method == 'GET':
        result = service.edit_form(category, code, caller)
        return Response({
            'ok': True,
            'action': result.action,
            'data': _serialize(result.entity),
            'catalogs': _catalogs(result),
        })
    return _entity_response(service.update(category, code, request.data, caller))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def hospital_edit_validation(request, category: str, code: int):
    return _report_response(HospitalService().update_check_only(category, code, request.data, _caller(request)))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def hospital_deactivate(request, category: str, code: int):
    return _entity_response(HospitalService().deactivate(category, code, _caller(request)))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def hospital_seize(request, category: str, code: int):
    return _entity_response(HospitalService().seize(category, code, _caller(request)))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def hospital_reactivate(request, category: str, code: int):
    return _entity_response(HospitalService().reactivate(category, code, _caller(request)))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffRole])
def hospital_history(request, category: str, code: int):
    """Transition log of one hospital, oldest first."""
    result = HospitalService().history(category, code, _caller(request))
    return Response({'ok': True, 'id': str(result.entity.perceptor_id), 'data': result.history})
