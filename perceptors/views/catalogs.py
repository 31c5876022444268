from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsAdminRole
from ..services.catalogs import refresh_all


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def catalogs_refresh(request):
    """Reload every catalog into the cache after the reference data changed."""
    keys = refresh_all()
    return Response({'ok': True, 'data': keys})
