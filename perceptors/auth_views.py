"""
Token login for the staff front-end.

Clients exchange username and password for a DRF token and send it as
``Authorization: Token <key>`` afterwards.  Only staff roles (managers
and administrators) may log in.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .permissions import STAFF_ROLES
from .serializers.auth import LoginSerializer

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data

    user = authenticate(request, username=vd['username'], password=vd['password'])
    if not user:
        logger.warning('failed login for %s from %s', vd['username'], request.META.get('REMOTE_ADDR'))
        return Response({'ok': False, 'detail': 'Invalid username or password.'}, status=400)
    if not (user.is_superuser or user.role in STAFF_ROLES):
        logger.warning('login refused for %s: role %s', user.username, user.role)
        return Response({'ok': False, 'detail': 'This account may not use the backend.'}, status=403)

    token_obj, _ = Token.objects.get_or_create(user=user)
    logger.info('login %s', user.username)
    return Response({
        'ok': True,
        'token': token_obj.key,
        'role': user.role,
        'user': {
            'id': user.id,
            'username': user.username,
            'name': user.get_full_name() or user.username,
            'role': user.role,
            'isAdministrator': user.is_administrator,
        },
    }, status=200)
