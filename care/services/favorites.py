from __future__ import annotations

import logging

from django.db import transaction

from care.exceptions import NotFoundError
from care.models import Doctor, FavoriteDoctor, FavoriteHospital, Hospital
from care.services.payloads import file_url, iso

logger = logging.getLogger(__name__)


def _require_hospital(hospital_id) -> None:
    if not Hospital.objects.filter(pk=hospital_id).exists():
        raise NotFoundError('Hospital not found.')


@transaction.atomic
def toggle_favorite_doctor(user, doctor_id: int, hospital_id: int) -> dict:
    if not Doctor.objects.filter(pk=doctor_id).exists():
        raise NotFoundError('Doctor not found.')
    _require_hospital(hospital_id)

    deleted, _ = FavoriteDoctor.objects.filter(user=user, doctor_id=doctor_id, hospital_id=hospital_id).delete()
    if deleted:
        logger.info('User %s unfavorited doctor %s at hospital %s', user.pk, doctor_id, hospital_id)
        return {'status': False, 'message': 'Doctor removed from favorites'}
    FavoriteDoctor.objects.get_or_create(user=user, doctor_id=doctor_id, hospital_id=hospital_id)
    logger.info('User %s favorited doctor %s at hospital %s', user.pk, doctor_id, hospital_id)
    return {'status': True, 'message': 'Doctor added to favorites'}


@transaction.atomic
def toggle_favorite_hospital(user, hospital_id: int) -> dict:
    _require_hospital(hospital_id)

    deleted, _ = FavoriteHospital.objects.filter(user=user, hospital_id=hospital_id).delete()
    if deleted:
        logger.info('User %s unfavorited hospital %s', user.pk, hospital_id)
        return {'status': False, 'message': 'Hospital removed from favorites'}
    FavoriteHospital.objects.get_or_create(user=user, hospital_id=hospital_id)
    logger.info('User %s favorited hospital %s', user.pk, hospital_id)
    return {'status': True, 'message': 'Hospital added to favorites'}


def list_favorites(user) -> dict:
    doctors = [
        {
            'fav_id': f.id,
            'doctor_id': f.doctor_id,
            'hospital_id': f.hospital_id,
            'doctor_name': f.doctor.name,
            'doctor_email': f.doctor.email,
            'doctor_phone': f.doctor.phone_number,
            'image': file_url(f.doctor.image),
            'hospital_name': f.hospital.name,
            'hospital_address': f.hospital.address,
            'created_at': iso(f.created_at),
        }
        for f in FavoriteDoctor.objects.filter(user=user).select_related('doctor', 'hospital').order_by('-created_at', '-id')
    ]
    hospitals = [
        {
            'fav_id': f.id,
            'hospital_id': f.hospital_id,
            'hospital_name': f.hospital.name,
            'hospital_address': f.hospital.address,
            'phone_number': f.hospital.phone_number,
            'email': f.hospital.email,
            'created_at': iso(f.created_at),
        }
        for f in FavoriteHospital.objects.filter(user=user).select_related('hospital').order_by('-created_at', '-id')
    ]
    return {'doctors': doctors, 'hospitals': hospitals}
