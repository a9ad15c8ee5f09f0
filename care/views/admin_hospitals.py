"""
Administrator hospital management.

Create accepts multipart data: the hospital fields, the owner contact
(``owner_name``, ``owner_email``, ``owner_phone``, ``owner_address``),
an optional ``logo`` file and up to ten ``images``.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..exceptions import ValidationError
from ..permissions import IsAdminRole
from ..serializers.directory import HospitalCreateSerializer, HospitalUpdateSerializer
from ..services import directory

MAX_IMAGES = 10


def uploaded_images(request) -> list:
    files = request.FILES.getlist('images') if hasattr(request.FILES, 'getlist') else []
    if len(files) > MAX_IMAGES:
        raise ValidationError(f'At most {MAX_IMAGES} images per request.')
    return files


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def hospitals(request):
    if request.method == 'GET':
        return Response({'success': True, 'hospitals': directory.list_hospitals()})

    s = HospitalCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    hospital = directory.create_hospital(
        s.validated_data, logo=request.FILES.get('logo'), images=uploaded_images(request),
    )
    return Response({'success': True, 'hospital_id': hospital.pk}, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def hospital_detail(request, hospital_id: int):
    if request.method == 'GET':
        return Response({'success': True, 'hospital': directory.get_hospital(hospital_id)})
    if request.method == 'DELETE':
        directory.delete_hospital(hospital_id)
        return Response({'success': True, 'message': 'Hospital deleted'})

    s = HospitalUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    directory.update_hospital(
        hospital_id, s.validated_data, logo=request.FILES.get('logo'), images=uploaded_images(request),
    )
    return Response({'success': True, 'message': 'Hospital updated successfully'})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def owner_hospitals(request, owner_id: int):
    return Response({'success': True, 'hospitals': directory.list_owner_hospitals(owner_id)})
