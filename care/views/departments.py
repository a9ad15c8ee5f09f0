"""
Department management for administrators and hospital accounts.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsHospitalManager
from ..serializers.directory import DepartmentSerializer, DepartmentUpdateSerializer
from ..services import directory
from ..services.payloads import department_data


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsHospitalManager])
def departments(request):
    if request.method == 'GET':
        return Response({'success': True, 'data': directory.list_departments()})

    s = DepartmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    dept = directory.create_department(s.validated_data)
    return Response(
        {'success': True, 'message': 'Department created successfully.', 'department': department_data(dept)},
        status=status.HTTP_201_CREATED,
    )


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsHospitalManager])
def department_detail(request, department_id: int):
    if request.method == 'DELETE':
        directory.delete_department(department_id)
        return Response({'success': True, 'message': 'Department deleted successfully.'})

    s = DepartmentUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    directory.update_department(department_id, s.validated_data)
    return Response({'success': True, 'message': 'Department updated successfully.'})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsHospitalManager])
def hospital_departments(request, hospital_id: int):
    return Response({'success': True, 'data': directory.list_departments(hospital_id)})
