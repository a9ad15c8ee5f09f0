"""
Appointment booking and status transitions.

Booking runs as one transaction: the acting user's row is locked while
the daily quota is counted, and the per doctor/hospital/day
``TokenCounter`` row is locked while the next token is computed, so two
bookings for the same key can never be handed the same token.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import Max
from django.utils import timezone
from rest_framework import exceptions

from care.exceptions import ConflictError, NotFoundError, QuotaExceededError, StoreError, ValidationError
from care.models import Appointment, Doctor, DoctorHospital, Hospital, Patient, TokenCounter, User
from care.permissions import CLINICAL_ROLES, has_role
from care.services.payloads import clean_text, doctor_data, hospital_data, patient_data

logger = logging.getLogger(__name__)

VALID_STATUSES = (Appointment.STATUS_PENDING, Appointment.STATUS_COMPLETED, Appointment.STATUS_CANCELLED)


def booking_day(appointment_date):
    """Calendar date of a booking in the site's time zone."""
    if timezone.is_aware(appointment_date):
        return timezone.localtime(appointment_date).date()
    return appointment_date.date()


def _next_token(doctor: Doctor, hospital: Hospital, day) -> tuple[TokenCounter, int]:
    counter, _ = TokenCounter.objects.get_or_create(doctor=doctor, hospital=hospital, day=day)
    counter = TokenCounter.objects.select_for_update().get(pk=counter.pk)
    highest = Appointment.objects.filter(
        doctor=doctor, hospital=hospital, appointment_date__date=day,
    ).aggregate(m=Max('token'))['m'] or 0
    return counter, max(highest, counter.last_token) + 1


def create_appointment(user: User, *, doctor_id=None, hospital_id=None, appointment_date=None,
                       notes: str = '', patient: Optional[dict] = None) -> dict:
    patient = patient or {}
    name = clean_text(patient.get('name'))
    phone_number = clean_text(patient.get('phone_number'))
    if not (doctor_id and hospital_id and appointment_date and name and phone_number):
        logger.warning('Booking rejected for user %s: missing required fields', user.pk)
        raise ValidationError('Missing required fields.')

    day = booking_day(appointment_date)
    limit = settings.BOOKING_DAILY_LIMIT
    try:
        with transaction.atomic():
            hospital = Hospital.objects.filter(pk=hospital_id).first()
            if hospital is None:
                raise NotFoundError('Hospital not found.')
            doctor = Doctor.objects.filter(pk=doctor_id).first()
            if doctor is None:
                raise NotFoundError('Doctor not found.')
            if settings.BOOKING_REQUIRE_DOCTOR_MAPPING and not DoctorHospital.objects.filter(
                    doctor=doctor, hospital=hospital).exists():
                raise ValidationError('Doctor is not available at this hospital.')

            # serialize quota checks for this user
            list(User.objects.select_for_update().filter(pk=user.pk).values_list('pk', flat=True))
            booked = Appointment.objects.filter(patient__created_by=user, appointment_date__date=day).count()
            if booked >= limit:
                logger.warning('User %s reached the daily limit (%s) for %s', user.pk, limit, day)
                raise QuotaExceededError(f'You can only book up to {limit} appointments per day.')

            new_patient = Patient.objects.create(
                name=name,
                date_of_birth=patient.get('date_of_birth'),
                gender=clean_text(patient.get('gender')),
                phone_number=phone_number,
                email=patient.get('email') or '',
                address=clean_text(patient.get('address')),
                created_by=user,
            )

            counter, token = _next_token(doctor, hospital, day)
            appointment = Appointment.objects.create(
                doctor=doctor,
                patient=new_patient,
                hospital=hospital,
                patient_name=name,
                appointment_date=appointment_date,
                status=Appointment.STATUS_PENDING,
                notes=clean_text(notes),
                token=token,
            )
            counter.last_token = token
            counter.save(update_fields=['last_token'])
    except DatabaseError as exc:
        logger.exception('Booking failed for user %s (doctor=%s hospital=%s)', user.pk, doctor_id, hospital_id)
        raise StoreError() from exc

    logger.info('Appointment %s booked: doctor=%s hospital=%s day=%s token=%s',
                appointment.pk, doctor.pk, hospital.pk, day, token)
    return {
        'message': 'Appointment created successfully.',
        'appointment_id': appointment.pk,
        'appointment_date': appointment.appointment_date.isoformat(),
        'token': token,
        'patient': patient_data(new_patient),
        'doctor': doctor_data(doctor),
        'hospital': hospital_data(hospital),
    }


def _check_can_cancel(appointment: Appointment, user: Optional[User]) -> None:
    if user is None:
        raise exceptions.NotAuthenticated()
    if has_role(user, CLINICAL_ROLES):
        return
    if appointment.patient.created_by_id != user.pk:
        raise exceptions.PermissionDenied('You cannot change this appointment.')


def cancel_appointment(appointment_id: int, user: Optional[User] = None, reason: str = '') -> None:
    with transaction.atomic():
        appointment = Appointment.objects.select_for_update().filter(pk=appointment_id).first()
        if appointment is None:
            raise NotFoundError('Appointment not found.')
        if settings.APPOINTMENT_OWNERSHIP_CHECK:
            _check_can_cancel(appointment, user)
        if appointment.status == Appointment.STATUS_CANCELLED:
            logger.warning('Appointment %s is already cancelled', appointment_id)
            raise ConflictError('Appointment already cancelled.')
        appointment.status = Appointment.STATUS_CANCELLED
        appointment.cancel_reason = clean_text(reason)[:255]
        appointment.save(update_fields=['status', 'cancel_reason'])
    logger.info('Appointment %s cancelled', appointment_id)


def update_appointment_status(appointment_id: int, new_status: str, user: Optional[User] = None) -> None:
    """Set the status unconditionally; only the value itself is checked."""
    if new_status not in VALID_STATUSES:
        raise ValidationError('Invalid status value')
    if settings.APPOINTMENT_OWNERSHIP_CHECK:
        if user is None:
            raise exceptions.NotAuthenticated()
        if not has_role(user, CLINICAL_ROLES):
            raise exceptions.PermissionDenied('Only hospital staff can change appointment status.')
    updated = Appointment.objects.filter(pk=appointment_id).update(status=new_status)
    if not updated:
        raise NotFoundError('Appointment not found')
    logger.info('Appointment %s status set to %s', appointment_id, new_status)
