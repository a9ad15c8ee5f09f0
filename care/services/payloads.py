"""
Helpers shared by the service modules: JSON projections of the
directory models, free-text sanitising, upload checks and page math.
"""
from __future__ import annotations

from typing import Optional, Tuple

import bleach
from django.conf import settings

from care.exceptions import ValidationError

MAX_PAGE_SIZE = 100


def file_url(field) -> Optional[str]:
    return field.url if field else None


def iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def clean_text(value) -> str:
    """Strip markup from user supplied text."""
    if value is None:
        return ''
    return bleach.clean(str(value), tags=set(), strip=True).strip()


def check_upload(f) -> None:
    size_mb = (f.size or 0) / (1024 * 1024)
    if size_mb > settings.UPLOAD_MAX_MB:
        raise ValidationError('File too large.')
    ctype = getattr(f, 'content_type', '') or ''
    if not any(ctype.startswith(prefix) for prefix in settings.ALLOWED_UPLOAD_TYPES):
        raise ValidationError('Unsupported file type.')


def page_window(page, limit, default_limit: int = 10) -> Tuple[int, int, int]:
    """Return ``(page, limit, offset)`` clamped to sane bounds."""
    page = max(1, int(page or 1))
    limit = min(MAX_PAGE_SIZE, max(1, int(limit or default_limit)))
    return page, limit, (page - 1) * limit


def hospital_data(h) -> dict:
    return {
        'id': h.id,
        'name': h.name,
        'logo': file_url(h.logo),
        'category': h.category,
        'address': h.address,
        'phone_number': h.phone_number,
        'email': h.email,
        'established_date': iso(h.established_date),
        'number_of_beds': h.number_of_beds,
        'website': h.website,
        'latitude': h.latitude,
        'longitude': h.longitude,
        'owner_id': h.owner_id,
        'status': h.status,
        'created_at': iso(h.created_at),
        'updated_at': iso(h.updated_at),
    }


def hospital_image_data(img) -> dict:
    return {'id': img.id, 'url': file_url(img.image), 'description': img.description or ''}


def department_data(d) -> dict:
    return {
        'id': d.id,
        'hospital_id': d.hospital_id,
        'name': d.name,
        'head_of_department': d.head_of_department,
        'contact_number': d.contact_number,
        'email': d.email,
    }


def doctor_data(d) -> dict:
    return {
        'id': d.id,
        'name': d.name,
        'specialization': d.specialization,
        'phone_number': d.phone_number,
        'email': d.email,
        'image': file_url(d.image),
    }


def patient_data(p) -> dict:
    return {
        'id': p.id,
        'name': p.name,
        'date_of_birth': iso(p.date_of_birth),
        'gender': p.gender,
        'phone_number': p.phone_number,
        'email': p.email,
        'address': p.address,
        'created_by': p.created_by_id,
    }


def schedule_data(s) -> dict:
    return {
        'id': s.id,
        'doctor_id': s.doctor_id,
        'hospital_id': s.hospital_id,
        'day_of_week': s.day_of_week,
        'start_time': s.start_time.strftime('%H:%M:%S'),
        'end_time': s.end_time.strftime('%H:%M:%S'),
        'notes': s.notes,
    }


def advertisement_data(ad) -> dict:
    return {
        'id': ad.id,
        'title': ad.title,
        'description': ad.description,
        'image': file_url(ad.image),
        'target_url': ad.target_url,
        'is_active': ad.is_active,
        'created_at': iso(ad.created_at),
    }


def user_data(u) -> dict:
    return {
        'id': u.id,
        'username': u.username,
        'email': u.email,
        'phone_number': u.phone_number,
        'role': u.role,
        'image': file_url(u.image),
    }
