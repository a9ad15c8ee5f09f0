"""
Directory administration: hospitals and their owners, images,
departments, doctor registration and rosters, weekly schedules and
advertisements.

Multi-step writes (hospital creation, doctor registration, image
batches) run inside ``transaction.atomic`` so a failure at any step
leaves no partial rows behind.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from django.db import transaction
from django.db.models import ProtectedError, Q

from care.exceptions import ConflictError, NotFoundError, ValidationError
from care.models import (
    Advertisement,
    Department,
    Doctor,
    DoctorDepartment,
    DoctorHospital,
    DoctorImage,
    DoctorSchedule,
    Hospital,
    HospitalImage,
    HospitalOwner,
    Owner,
    User,
)
from care.services.payloads import (
    advertisement_data,
    check_upload,
    clean_text,
    department_data,
    hospital_data,
    hospital_image_data,
    schedule_data,
)

logger = logging.getLogger(__name__)

HOSPITAL_TEXT_FIELDS = ('name', 'category', 'address', 'phone_number')
HOSPITAL_FIELDS = HOSPITAL_TEXT_FIELDS + (
    'email', 'established_date', 'number_of_beds', 'website', 'latitude', 'longitude', 'status',
)


def _contact_lookup(email: Optional[str], phone: Optional[str]) -> Optional[Q]:
    q = Q()
    if email:
        q |= Q(email=email)
    if phone:
        q |= Q(phone_number=phone)
    return q if (email or phone) else None


# ---------------------------------------------------------------------
# Hospitals
# ---------------------------------------------------------------------
def _find_or_create_owner_user(email: Optional[str], phone: Optional[str]) -> Optional[User]:
    lookup = _contact_lookup(email, phone)
    if lookup is None:
        logger.warning('No owner email or phone given; owner account not created')
        return None
    username = email or phone
    user = User.objects.filter(lookup | Q(username=username)).order_by('id').first()
    if user is not None:
        logger.info('Reusing existing user %s as hospital owner', user.pk)
        return user
    user = User(username=username, email=email or '', phone_number=phone or None, role=User.ROLE_OWNER)
    user.set_unusable_password()
    user.save()
    logger.info('Created owner user %s', user.pk)
    return user


def _find_or_create_owner(data: dict) -> Owner:
    email = data.get('owner_email') or None
    phone = data.get('owner_phone') or None
    lookup = _contact_lookup(email, phone)
    if lookup is not None:
        owner = Owner.objects.filter(lookup).order_by('id').first()
        if owner is not None:
            return owner
    return Owner.objects.create(
        name=clean_text(data.get('owner_name')),
        email=email,
        phone_number=phone,
        address=clean_text(data.get('owner_address')),
    )


def _store_hospital_images(hospital: Hospital, files: Iterable) -> int:
    count = 0
    for f in files:
        check_upload(f)
        HospitalImage.objects.create(hospital=hospital, image=f)
        count += 1
    return count


def _hospital_values(data: dict) -> dict:
    values = {k: data[k] for k in HOSPITAL_FIELDS if k in data}
    for k in HOSPITAL_TEXT_FIELDS:
        if k in values:
            values[k] = clean_text(values[k])
    return values


@transaction.atomic
def create_hospital(data: dict, logo=None, images: Iterable = ()) -> Hospital:
    """Create a hospital together with its owner records and images."""
    _find_or_create_owner_user(data.get('owner_email') or None, data.get('owner_phone') or None)
    owner = _find_or_create_owner(data)

    if logo is not None:
        check_upload(logo)
    hospital = Hospital(owner=owner, **_hospital_values(data))
    if logo is not None:
        hospital.logo = logo
    hospital.save()
    HospitalOwner.objects.get_or_create(hospital=hospital, owner=owner)
    stored = _store_hospital_images(hospital, images)
    logger.info('Hospital %s created for owner %s with %s images', hospital.pk, owner.pk, stored)
    return hospital


def _admin_hospital_data(h: Hospital) -> dict:
    data = hospital_data(h)
    data['owner_name'] = h.owner.name if h.owner else None
    data['owner_email'] = h.owner.email if h.owner else None
    data['owner_phone'] = h.owner.phone_number if h.owner else None
    data['images'] = [hospital_image_data(img) for img in h.images.all()]
    return data


def _admin_hospitals():
    return Hospital.objects.select_related('owner').prefetch_related('images')


def list_hospitals() -> list[dict]:
    return [_admin_hospital_data(h) for h in _admin_hospitals().order_by('-created_at', '-id')]


def get_hospital(hospital_id: int) -> dict:
    h = _admin_hospitals().filter(pk=hospital_id).first()
    if h is None:
        raise NotFoundError('Hospital not found')
    return _admin_hospital_data(h)


@transaction.atomic
def update_hospital(hospital_id: int, data: dict, logo=None, images: Iterable = ()) -> None:
    hospital = Hospital.objects.select_for_update().filter(pk=hospital_id).first()
    if hospital is None:
        raise NotFoundError('Hospital not found')
    values = _hospital_values(data)
    for field, value in values.items():
        setattr(hospital, field, value)
    if logo is not None:
        check_upload(logo)
        hospital.logo = logo
    if values or logo is not None:
        hospital.save()
    else:
        logger.warning('Hospital %s update carried no fields', hospital_id)
    stored = _store_hospital_images(hospital, images)
    logger.info('Hospital %s updated: fields=%s new_images=%s', hospital_id, sorted(values), stored)


def delete_hospital(hospital_id: int) -> None:
    hospital = Hospital.objects.filter(pk=hospital_id).first()
    if hospital is None:
        raise NotFoundError('Hospital not found')
    try:
        with transaction.atomic():
            hospital.delete()
    except ProtectedError as exc:
        raise ConflictError('Hospital has appointments and cannot be deleted.') from exc
    logger.info('Hospital %s deleted', hospital_id)


def list_owner_hospitals(owner_id: int) -> list[dict]:
    hospitals = list(Hospital.objects.filter(owner_id=owner_id).prefetch_related('images').order_by('-created_at', '-id'))
    if not hospitals:
        raise NotFoundError('No hospitals found for this owner.')
    result = []
    for h in hospitals:
        item = hospital_data(h)
        item['images'] = [hospital_image_data(img) for img in h.images.all()]
        result.append(item)
    return result


def add_hospital_images(hospital_id: int, files: list) -> int:
    if not files:
        raise ValidationError('No images uploaded')
    hospital = Hospital.objects.filter(pk=hospital_id).first()
    if hospital is None:
        raise NotFoundError('Hospital not found')
    with transaction.atomic():
        stored = _store_hospital_images(hospital, files)
    logger.info('Added %s images to hospital %s', stored, hospital_id)
    return stored


# ---------------------------------------------------------------------
# Departments
# ---------------------------------------------------------------------
def create_department(data: dict) -> Department:
    hospital = Hospital.objects.filter(pk=data['hospital_id']).first()
    if hospital is None:
        raise NotFoundError('Hospital not found')
    dept = Department.objects.create(
        hospital=hospital,
        name=clean_text(data['name']),
        head_of_department=clean_text(data.get('head_of_department')),
        contact_number=clean_text(data.get('contact_number')),
        email=data.get('email') or '',
    )
    logger.info('Department %s created for hospital %s', dept.pk, hospital.pk)
    return dept


def update_department(department_id: int, data: dict) -> None:
    dept = Department.objects.filter(pk=department_id).first()
    if dept is None:
        raise NotFoundError('Department not found')
    for field in ('name', 'head_of_department', 'contact_number'):
        if field in data:
            setattr(dept, field, clean_text(data[field]))
    if 'email' in data:
        dept.email = data['email'] or ''
    dept.save()
    logger.info('Department %s updated', department_id)


def delete_department(department_id: int) -> None:
    deleted, _ = Department.objects.filter(pk=department_id).delete()
    if not deleted:
        raise NotFoundError('Department not found')
    logger.info('Department %s deleted', department_id)


def list_departments(hospital_id: Optional[int] = None) -> list[dict]:
    qs = Department.objects.all()
    if hospital_id is not None:
        qs = qs.filter(hospital_id=hospital_id)
    return [department_data(d) for d in qs.order_by('id')]


# ---------------------------------------------------------------------
# Doctors
# ---------------------------------------------------------------------
def _doctor_username(name: str, email: str) -> str:
    base = re.sub(r'\s+', '', name).lower()[:150]
    if base and not User.objects.filter(username=base).exists():
        return base
    return email


def _find_or_create_doctor_user(name: str, email: str, phone: str) -> User:
    user = User.objects.filter(_contact_lookup(email, phone)).order_by('id').first()
    if user is not None:
        return user
    user = User(username=_doctor_username(name, email), email=email, phone_number=phone or None,
                role=User.ROLE_DOCTOR)
    user.set_unusable_password()
    user.save()
    logger.info('Created doctor user %s', user.pk)
    return user


@transaction.atomic
def register_doctor(data: dict, image=None) -> Doctor:
    """Create (or reuse) a doctor and map them to a hospital/department.

    Doctors are matched by email.  Existing mappings are left as they
    are; an uploaded image becomes the profile image when none is set
    and is always added to the doctor's gallery.
    """
    name = clean_text(data.get('name'))
    email = (data.get('email') or '').strip()
    hospital_id = data.get('hospital_id')
    if not name or not email or not hospital_id:
        raise ValidationError('name, email and hospital_id are required.')
    phone = clean_text(data.get('phone_number'))

    hospital = Hospital.objects.filter(pk=hospital_id).first()
    if hospital is None:
        raise NotFoundError('Hospital not found')
    department = None
    if data.get('department_id'):
        department = Department.objects.filter(pk=data['department_id'], hospital=hospital).first()
        if department is None:
            raise ValidationError('Department does not belong to this hospital.')
    if image is not None:
        check_upload(image)

    user = _find_or_create_doctor_user(name, email, phone)
    doctor = Doctor.objects.filter(email=email).order_by('id').first()
    if doctor is None:
        doctor = Doctor.objects.create(
            name=name,
            specialization=clean_text(data.get('specialization')),
            phone_number=phone,
            email=email,
            user=user if not hasattr(user, 'doctor_profile') else None,
        )
        logger.info('Doctor %s created', doctor.pk)
    else:
        logger.info('Doctor %s already registered; reusing', doctor.pk)

    _, mapped = DoctorHospital.objects.get_or_create(
        doctor=doctor, hospital=hospital, defaults={'department': department},
    )
    if not mapped:
        logger.info('Doctor %s already mapped to hospital %s', doctor.pk, hospital.pk)
    if department is not None:
        DoctorDepartment.objects.get_or_create(doctor=doctor, department=department)

    if image is not None:
        gallery = DoctorImage.objects.create(doctor=doctor, image=image,
                                             description=clean_text(data.get('description')) or None)
        if not doctor.image:
            doctor.image = gallery.image.name
            doctor.save(update_fields=['image'])
    return doctor


def remove_doctor_from_hospital(hospital_id: int, doctor_id: int) -> None:
    deleted, _ = DoctorHospital.objects.filter(hospital_id=hospital_id, doctor_id=doctor_id).delete()
    if not deleted:
        raise NotFoundError('Doctor is not mapped to this hospital.')
    logger.info('Doctor %s removed from hospital %s', doctor_id, hospital_id)


# ---------------------------------------------------------------------
# Schedules
# ---------------------------------------------------------------------
def _check_time_range(start, end) -> None:
    if start and end and end <= start:
        raise ValidationError('end_time must be after start_time.')


def create_schedule(data: dict) -> DoctorSchedule:
    if not Doctor.objects.filter(pk=data['doctor_id']).exists():
        raise NotFoundError('Doctor not found.')
    hospital_id = data.get('hospital_id')
    if hospital_id and not Hospital.objects.filter(pk=hospital_id).exists():
        raise NotFoundError('Hospital not found')
    _check_time_range(data['start_time'], data['end_time'])
    schedule = DoctorSchedule.objects.create(
        doctor_id=data['doctor_id'],
        hospital_id=hospital_id or None,
        day_of_week=data['day_of_week'],
        start_time=data['start_time'],
        end_time=data['end_time'],
        notes=clean_text(data.get('notes')),
    )
    logger.info('Schedule %s added for doctor %s', schedule.pk, schedule.doctor_id)
    return schedule


def update_schedule(schedule_id: int, data: dict) -> None:
    schedule = DoctorSchedule.objects.filter(pk=schedule_id).first()
    if schedule is None:
        raise NotFoundError('Schedule not found')
    for field in ('day_of_week', 'start_time', 'end_time'):
        if field in data:
            setattr(schedule, field, data[field])
    if 'notes' in data:
        schedule.notes = clean_text(data['notes'])
    _check_time_range(schedule.start_time, schedule.end_time)
    schedule.save()
    logger.info('Schedule %s updated', schedule_id)


def delete_schedule(schedule_id: int) -> None:
    deleted, _ = DoctorSchedule.objects.filter(pk=schedule_id).delete()
    if not deleted:
        raise NotFoundError('Schedule not found')
    logger.info('Schedule %s deleted', schedule_id)


def list_schedules(doctor_id: int) -> list[dict]:
    return [schedule_data(s) for s in DoctorSchedule.objects.filter(doctor_id=doctor_id).order_by('id')]


# ---------------------------------------------------------------------
# Advertisements
# ---------------------------------------------------------------------
def create_advertisement(data: dict, image=None) -> Advertisement:
    if image is None:
        raise ValidationError('Image file is required')
    check_upload(image)
    ad = Advertisement.objects.create(
        title=clean_text(data.get('title')),
        description=clean_text(data.get('description')),
        target_url=data.get('target_url') or '',
        image=image,
    )
    logger.info('Advertisement %s created', ad.pk)
    return ad


def list_advertisements(active_only: bool = False) -> list[dict]:
    qs = Advertisement.objects.all()
    if active_only:
        qs = qs.filter(is_active=True)
    return [advertisement_data(ad) for ad in qs.order_by('-created_at', '-id')]


@transaction.atomic
def toggle_advertisement(ad_id: int) -> bool:
    ad = Advertisement.objects.select_for_update().filter(pk=ad_id).first()
    if ad is None:
        raise NotFoundError('Ad not found')
    ad.is_active = not ad.is_active
    ad.save(update_fields=['is_active'])
    logger.info('Advertisement %s active=%s', ad_id, ad.is_active)
    return ad.is_active


def delete_advertisement(ad_id: int) -> None:
    deleted, _ = Advertisement.objects.filter(pk=ad_id).delete()
    if not deleted:
        raise NotFoundError('Ad not found')
    logger.info('Advertisement %s deleted', ad_id)
