"""
Appointment endpoints.

Patients book, list and inspect their own appointments.  Cancelling and
changing status are open endpoints unless ``APPOINTMENT_OWNERSHIP_CHECK``
is enabled, in which case the booking service checks the caller.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ..auth_views import get_user_for_request
from ..authentication import OptionalBearerAuthentication
from ..serializers.booking import (
    AppointmentCreateSerializer,
    AppointmentListQuerySerializer,
    CancelSerializer,
    MyAppointmentsQuerySerializer,
    StatusSerializer,
)
from ..services import appointments as appointment_queries
from ..services import booking


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create_appointment(request):
    s = AppointmentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    result = booking.create_appointment(
        request.user,
        doctor_id=v.get('doctor_id'),
        hospital_id=v.get('hospital_id'),
        appointment_date=v.get('appointment_date'),
        notes=v.get('notes', ''),
        patient=dict(v.get('patient') or {}),
    )
    return Response({'success': True, **result})

create_appointment.cls.throttle_scope = 'booking'


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def appointment_detail(request, appointment_id: int):
    appointment = appointment_queries.get_appointment_detail(appointment_id, request.user)
    return Response({'success': True, 'appointment': appointment})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_appointments(request):
    """The caller's bookings, optionally bounded by date and status."""
    q = MyAppointmentsQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    v = q.validated_data
    rows = appointment_queries.list_my_appointments(
        request.user,
        start_date=v.get('start_date'),
        end_date=v.get('end_date'),
        status=v.get('status'),
    )
    return Response({'success': True, 'appointments': rows})


@api_view(['PUT'])
@authentication_classes([OptionalBearerAuthentication])
@permission_classes([AllowAny])
def cancel_appointment(request, appointment_id: int):
    s = CancelSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    booking.cancel_appointment(
        appointment_id,
        user=get_user_for_request(request),
        reason=s.validated_data['cancel_reason'],
    )
    return Response({'success': True, 'message': 'Appointment cancelled successfully.'})


@api_view(['PUT'])
@authentication_classes([OptionalBearerAuthentication])
@permission_classes([AllowAny])
def update_appointment_status(request, appointment_id: int):
    s = StatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    new_status = s.validated_data['status']
    booking.update_appointment_status(appointment_id, new_status, user=get_user_for_request(request))
    return Response({'success': True, 'message': f'Status updated to {new_status}'})


@api_view(['GET'])
@authentication_classes([OptionalBearerAuthentication])
@permission_classes([AllowAny])
def doctor_appointments(request):
    """Appointment listing for doctors and hospital desks."""
    q = AppointmentListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    v = q.validated_data
    result = appointment_queries.list_appointments(
        hospital_id=v.get('hospital_id'),
        doctor_id=v.get('doctor_id'),
        page=v['page'],
        limit=v['limit'],
    )
    return Response({'success': True, **result})
