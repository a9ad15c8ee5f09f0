from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ..serializers.directory import ScheduleSerializer, ScheduleUpdateSerializer
from ..services import directory
from ..services.payloads import schedule_data


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create_schedule(request):
    s = ScheduleSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    schedule = directory.create_schedule(s.validated_data)
    return Response({'success': True, 'message': 'Doctor schedule added', 'schedule': schedule_data(schedule)},
                    status=status.HTTP_201_CREATED)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def schedule_detail(request, schedule_id: int):
    if request.method == 'DELETE':
        directory.delete_schedule(schedule_id)
        return Response({'success': True, 'message': 'Doctor schedule deleted'})

    s = ScheduleUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    directory.update_schedule(schedule_id, s.validated_data)
    return Response({'success': True, 'message': 'Doctor schedule updated'})


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def doctor_schedules(request, doctor_id: int):
    return Response({'success': True, 'schedules': directory.list_schedules(doctor_id)})
