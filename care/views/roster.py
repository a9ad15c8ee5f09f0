"""
Doctor rosters and hospital galleries, managed by administrators and
hospital accounts.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsHospitalManager
from ..serializers.directory import DoctorRegisterSerializer
from ..services import directory
from .admin_hospitals import uploaded_images


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalManager])
def register_doctor(request):
    """Create or reuse a doctor (matched by email) and map them to a hospital.

    Multipart fields: ``name``, ``email``, ``hospital_id`` (required),
    ``specialization``, ``phone_number``, ``department_id``,
    ``description`` and an optional ``image`` file.
    """
    s = DoctorRegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    doctor = directory.register_doctor(s.validated_data, image=request.FILES.get('image'))
    return Response({'success': True, 'message': 'Doctor created and mapped successfully.', 'doctor_id': doctor.pk})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsHospitalManager])
def remove_doctor(request, hospital_id: int, doctor_id: int):
    directory.remove_doctor_from_hospital(hospital_id, doctor_id)
    return Response({'success': True, 'message': 'Doctor removed from hospital successfully'})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsHospitalManager])
def hospital_images(request, hospital_id: int):
    stored = directory.add_hospital_images(hospital_id, uploaded_images(request))
    return Response({'success': True, 'message': 'Images added successfully', 'count': stored},
                    status=status.HTTP_200_OK)
