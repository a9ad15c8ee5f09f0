from __future__ import annotations

from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from ..auth_views import get_user_for_request
from ..authentication import OptionalBearerAuthentication
from ..serializers.search import DoctorListQuerySerializer
from ..services.doctors import get_doctor_detail, list_doctors_for_hospital


@api_view(['GET'])
@authentication_classes([OptionalBearerAuthentication])
@permission_classes([AllowAny])
def hospital_doctors(request, hospital_id: int):
    """Doctors practising at a hospital, filterable by department and name."""
    q = DoctorListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    v = q.validated_data
    result = list_doctors_for_hospital(
        hospital_id,
        department_id=v.get('department_id'),
        name=v.get('name') or None,
        page=v['page'],
        limit=v['limit'],
        user=get_user_for_request(request),
    )
    return Response({'success': True, **result})


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def doctor_details(request, hospital_id: int, doctor_id: int):
    return Response({'success': True, 'doctor': get_doctor_detail(hospital_id, doctor_id)})
