"""
Public hospital discovery endpoints.

Both endpoints accept anonymous callers; when a valid bearer token is
sent the results carry the caller's favorite flags.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from ..auth_views import get_user_for_request
from ..authentication import OptionalBearerAuthentication
from ..serializers.search import NearbyQuerySerializer
from ..services.geo import get_hospital_details, search_nearby_hospitals


@api_view(['GET'])
@authentication_classes([OptionalBearerAuthentication])
@permission_classes([AllowAny])
def nearby_hospitals(request):
    """Hospitals within ``radius`` km of a point, nearest first.

    Query: ``latitude``, ``longitude`` (required), ``radius`` (km),
    ``page``, ``limit`` and ``department`` (substring of a department
    name).
    """
    q = NearbyQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    v = q.validated_data
    result = search_nearby_hospitals(
        v.get('latitude'),
        v.get('longitude'),
        radius_km=v['radius'],
        page=v['page'],
        limit=v['limit'],
        department=v.get('department') or None,
        user=get_user_for_request(request),
    )
    return Response({'success': True, **result})


@api_view(['GET'])
@authentication_classes([OptionalBearerAuthentication])
@permission_classes([AllowAny])
def hospital_details(request, hospital_id: int):
    hospital = get_hospital_details(hospital_id, user=get_user_for_request(request))
    return Response({'success': True, 'hospital': hospital})
