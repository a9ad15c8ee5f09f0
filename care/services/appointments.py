"""
Read side of appointments: a patient's own bookings and the listing
used by doctors and hospital staff.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db.models import Q

from care.exceptions import NotFoundError
from care.models import Appointment
from care.services.payloads import doctor_data, hospital_data, iso, page_window, patient_data

logger = logging.getLogger(__name__)


def _base_queryset():
    return Appointment.objects.select_related('doctor', 'hospital', 'patient')


def get_appointment_detail(appointment_id: int, user) -> dict:
    a = _base_queryset().filter(pk=appointment_id, patient__created_by=user).first()
    if a is None:
        logger.warning('Appointment %s not visible to user %s', appointment_id, user.pk)
        raise NotFoundError('Appointment not found or access denied.')
    return {
        'id': a.id,
        'date': iso(a.appointment_date),
        'status': a.status,
        'token': a.token,
        'notes': a.notes,
        'doctor': {'id': a.doctor.id, 'name': a.doctor.name, 'specialization': a.doctor.specialization},
        'hospital': {'id': a.hospital.id, 'name': a.hospital.name, 'address': a.hospital.address},
        'patient': patient_data(a.patient),
    }


def list_my_appointments(user, *, start_date=None, end_date=None, status: Optional[str] = None) -> list[dict]:
    """Bookings made by ``user``, newest first.

    ``start_date``/``end_date`` are inclusive calendar dates.
    """
    conditions = Q(patient__created_by=user)
    if start_date:
        conditions &= Q(appointment_date__date__gte=start_date)
    if end_date:
        conditions &= Q(appointment_date__date__lte=end_date)
    if status:
        conditions &= Q(status=status)

    rows = _base_queryset().filter(conditions).order_by('-appointment_date', '-id')
    return [
        {
            'appointment_id': a.id,
            'appointment_date': iso(a.appointment_date),
            'status': a.status,
            'token': a.token,
            'notes': a.notes,
            'patient': patient_data(a.patient),
            'doctor': doctor_data(a.doctor),
            'hospital': hospital_data(a.hospital),
        }
        for a in rows
    ]


def list_appointments(*, hospital_id: Optional[int] = None, doctor_id: Optional[int] = None, page=1, limit=10):
    page, limit, offset = page_window(page, limit)
    conditions = Q()
    if hospital_id:
        conditions &= Q(hospital_id=hospital_id)
    if doctor_id:
        conditions &= Q(doctor_id=doctor_id)

    qs = _base_queryset().filter(conditions)
    total = qs.count()
    rows = qs.order_by('-appointment_date', '-id')[offset:offset + limit]
    appointments = [
        {
            'appointment_id': a.id,
            'appointment_date': iso(a.appointment_date),
            'status': a.status,
            'token': a.token,
            'notes': a.notes,
            'cancel_reason': a.cancel_reason,
            'doctor_id': a.doctor_id,
            'doctor_name': a.doctor.name,
            'hospital_id': a.hospital_id,
            'hospital_name': a.hospital.name,
            'patient_id': a.patient_id,
            'patient_name': a.patient_name,
        }
        for a in rows
    ]
    return {'page': page, 'limit': limit, 'total': total, 'appointments': appointments}
