"""
Nearby-hospital search and hospital detail read model.

Distances are computed by the database with the spherical law of
cosines so that filtering, ordering and pagination all happen in SQL.
"""
from __future__ import annotations

import logging
import math
from typing import Optional

from django.db.models import Case, Exists, F, FloatField, OuterRef, Prefetch, Value, When
from django.db.models.functions import ACos, Cos, Greatest, Least, Radians, Sin

from care.exceptions import NotFoundError, ValidationError
from care.models import Department, DoctorHospital, FavoriteDoctor, FavoriteHospital, Hospital, HospitalImage
from care.services.payloads import department_data, doctor_data, hospital_data, hospital_image_data, page_window

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
# precision of the reported distance only; filtering uses the exact value
DISTANCE_DECIMALS = 3


def distance_km(latitude: float, longitude: float):
    """Great-circle distance from the given point to each hospital, in km."""
    lat = math.radians(latitude)
    lon = math.radians(longitude)
    cosine = (
        Value(math.cos(lat)) * Cos(Radians(F('latitude'))) * Cos(Radians(F('longitude')) - Value(lon))
        + Value(math.sin(lat)) * Sin(Radians(F('latitude')))
    )
    clamped = Least(Greatest(cosine, Value(-1.0)), Value(1.0), output_field=FloatField())
    # acos noise can put an identical point a few cm away
    return Case(
        When(latitude=latitude, longitude=longitude, then=Value(0.0)),
        default=Value(EARTH_RADIUS_KM) * ACos(clamped),
        output_field=FloatField(),
    )


def _favorite_hospital_flag(user):
    if user is None:
        return Value(False)
    return Exists(FavoriteHospital.objects.filter(user=user, hospital=OuterRef('pk')))


def search_nearby_hospitals(latitude, longitude, *, radius_km: float = 10, page=1, limit=10,
                            department: Optional[str] = None, user=None) -> dict:
    if latitude is None or longitude is None:
        raise ValidationError('latitude and longitude are required')
    page, limit, offset = page_window(page, limit)

    filters = []
    if department:
        filters.append(Exists(Department.objects.filter(hospital=OuterRef('pk'), name__icontains=department)))

    qs = (
        Hospital.objects.annotate(distance=distance_km(float(latitude), float(longitude)))
        .filter(*filters, distance__lte=radius_km)
    )
    total = qs.count()

    rows = (
        qs.annotate(is_favorite=_favorite_hospital_flag(user))
        .prefetch_related(
            Prefetch('images', queryset=HospitalImage.objects.order_by('id')),
            Prefetch('departments', queryset=Department.objects.order_by('id')),
        )
        .order_by('distance', 'id')[offset:offset + limit]
    )

    hospitals = []
    for h in rows:
        item = hospital_data(h)
        item['distance'] = round(h.distance, DISTANCE_DECIMALS)
        item['is_favorite'] = bool(h.is_favorite)
        item['images'] = [
            {'url': img['url'], 'description': img['description']}
            for img in map(hospital_image_data, h.images.all())
        ]
        item['departments'] = [d.name for d in h.departments.all()]
        hospitals.append(item)

    logger.info('Nearby search (%s, %s) r=%skm page=%s: %s of %s',
                latitude, longitude, radius_km, page, len(hospitals), total)
    return {'page': page, 'limit': limit, 'total': total, 'hospitals': hospitals}


def get_hospital_details(hospital_id: int, user=None) -> dict:
    """Hospital profile with images, departments and their doctors.

    Doctors are grouped by the department recorded on their mapping to
    this hospital; mappings without a department of this hospital are
    listed under ``unassigned_doctors``.  ``is_favorite`` on doctors is
    scoped to this hospital.
    """
    hospital = Hospital.objects.filter(pk=hospital_id).first()
    if hospital is None:
        raise NotFoundError('Hospital not found')

    favorite_doctor_ids: set[int] = set()
    is_favorite = False
    if user is not None:
        favorite_doctor_ids = set(
            FavoriteDoctor.objects.filter(user=user, hospital=hospital).values_list('doctor_id', flat=True)
        )
        is_favorite = FavoriteHospital.objects.filter(user=user, hospital=hospital).exists()

    departments = list(hospital.departments.order_by('id'))
    by_department: dict[int, list] = {d.id: [] for d in departments}
    unassigned = []
    links = (
        DoctorHospital.objects.filter(hospital=hospital)
        .select_related('doctor')
        .order_by('doctor__name', 'doctor_id')
    )
    for link in links:
        item = doctor_data(link.doctor)
        item['department_id'] = link.department_id
        item['is_favorite'] = link.doctor_id in favorite_doctor_ids
        by_department.get(link.department_id, unassigned).append(item)

    data = hospital_data(hospital)
    data['is_favorite'] = is_favorite
    data['images'] = [hospital_image_data(img) for img in hospital.images.order_by('id')]
    data['departments'] = [dict(department_data(d), doctors=by_department[d.id]) for d in departments]
    data['unassigned_doctors'] = unassigned
    return data
