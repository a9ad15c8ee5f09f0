from __future__ import annotations

import logging
from typing import Optional

from django.db.models import Avg, Case, Exists, IntegerField, OuterRef, Q, Subquery, Value, When

from care.exceptions import NotFoundError
from care.models import (
    Doctor,
    DoctorDepartment,
    DoctorFee,
    DoctorHospital,
    DoctorReview,
    DoctorSchedule,
    FavoriteDoctor,
)
from care.services.payloads import doctor_data, iso, page_window, schedule_data

logger = logging.getLogger(__name__)

DAY_ORDER = Case(
    *[When(day_of_week=day, then=Value(i)) for i, day in enumerate(DoctorSchedule.DAYS_OF_WEEK)],
    default=Value(len(DoctorSchedule.DAYS_OF_WEEK)),
    output_field=IntegerField(),
)


def list_doctors_for_hospital(hospital_id: int, *, department_id: Optional[int] = None, name: Optional[str] = None,
                              page=1, limit=10, user=None):
    """Doctors mapped to a hospital, one row per doctor, ordered by name.

    ``department_name`` is the lowest-id department the doctor belongs
    to (restricted to ``department_id`` when filtering).
    """
    page, limit, offset = page_window(page, limit)

    filters = [Exists(DoctorHospital.objects.filter(doctor=OuterRef('pk'), hospital_id=hospital_id))]
    memberships = DoctorDepartment.objects.filter(doctor=OuterRef('pk'))
    if department_id:
        memberships = memberships.filter(department_id=department_id)
        filters.append(Exists(memberships))
    if name:
        filters.append(Q(name__icontains=name))

    qs = Doctor.objects.filter(*filters)
    total = qs.count()

    if user is not None:
        favorite = Exists(FavoriteDoctor.objects.filter(user=user, doctor=OuterRef('pk'), hospital_id=hospital_id))
    else:
        favorite = Value(False)
    rows = (
        qs.annotate(
            department_name=Subquery(memberships.order_by('department_id').values('department__name')[:1]),
            is_favorite=favorite,
        )
        .order_by('name', 'id')[offset:offset + limit]
    )

    doctors = []
    for d in rows:
        item = doctor_data(d)
        item['department_name'] = d.department_name
        item['is_favorite'] = bool(d.is_favorite)
        doctors.append(item)
    return {'page': page, 'limit': limit, 'total': total, 'doctors': doctors}


def get_doctor_detail(hospital_id: int, doctor_id: int) -> dict:
    link = (
        DoctorHospital.objects.select_related('doctor', 'hospital', 'department')
        .filter(doctor_id=doctor_id, hospital_id=hospital_id)
        .first()
    )
    if link is None:
        raise NotFoundError('Doctor not found for this hospital.')
    doctor, hospital = link.doctor, link.hospital

    schedules = DoctorSchedule.objects.filter(doctor=doctor).annotate(day_order=DAY_ORDER).order_by(
        'day_order', 'start_time', 'id')
    reviews = list(DoctorReview.objects.filter(doctor=doctor).order_by('-created_at', '-id'))
    average = DoctorReview.objects.filter(doctor=doctor).aggregate(avg=Avg('rating'))['avg']
    fee = DoctorFee.objects.filter(doctor=doctor).values_list('consultation_fee', flat=True).first()

    data = doctor_data(doctor)
    data['hospital'] = {
        'id': hospital.id,
        'name': hospital.name,
        'address': hospital.address,
        'phone': hospital.phone_number,
        'email': hospital.email,
    }
    data['departments'] = (
        [{'id': link.department.id, 'name': link.department.name}] if link.department else []
    )
    data['consultation_fee'] = str(fee) if fee is not None else None
    data['average_rating'] = round(float(average), 1) if average is not None else None
    data['total_reviews'] = len(reviews)
    data['schedules'] = [schedule_data(s) for s in schedules]
    data['reviews'] = [
        {
            'id': r.id,
            'patient_name': r.patient_name,
            'rating': r.rating,
            'comment': r.comment,
            'created_at': iso(r.created_at),
        }
        for r in reviews
    ]
    return data
