from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..serializers.booking import FavoriteDoctorSerializer, FavoriteHospitalSerializer
from ..services import favorites


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def toggle_favorite_doctor(request):
    s = FavoriteDoctorSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    result = favorites.toggle_favorite_doctor(
        request.user, s.validated_data['doctor_id'], s.validated_data['hospital_id'],
    )
    return Response({'success': True, **result})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def toggle_favorite_hospital(request):
    s = FavoriteHospitalSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    result = favorites.toggle_favorite_hospital(request.user, s.validated_data['hospital_id'])
    return Response({'success': True, **result})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def all_favorites(request):
    return Response({'success': True, **favorites.list_favorites(request.user)})
