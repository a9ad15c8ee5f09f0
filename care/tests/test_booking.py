import datetime
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from django.db import connection
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from care.exceptions import ConflictError, NotFoundError, QuotaExceededError, ValidationError
from care.models import Appointment, Doctor, Hospital, Patient, TokenCounter, User
from care.services import booking

from .conftest import bearer

pytestmark = pytest.mark.django_db

PATIENT = {"name": "Ravi Kumar", "phone_number": "9876543210", "gender": "male"}


def at(day: int, hour: int = 10, month: int = 3):
    return timezone.make_aware(datetime.datetime(2024, month, day, hour, 0))


def book(user, doctor, hospital, when, **extra):
    return booking.create_appointment(
        user, doctor_id=doctor.pk, hospital_id=hospital.pk, appointment_date=when, patient=dict(PATIENT), **extra,
    )


def test_sequential_bookings_get_consecutive_tokens(patient_user, doctor, hospital):
    other = User.objects.create_user(username="p2", password="x", role="patient")
    first = book(patient_user, doctor, hospital, at(1, 9))
    second = book(patient_user, doctor, hospital, at(1, 11))
    third = book(other, doctor, hospital, at(1, 15))
    assert [first["token"], second["token"], third["token"]] == [1, 2, 3]
    counter = TokenCounter.objects.get(doctor=doctor, hospital=hospital, day=datetime.date(2024, 3, 1))
    assert counter.last_token == 3


def test_tokens_are_scoped_per_doctor_hospital_and_day(patient_user, doctor, hospital):
    other_doctor = Doctor.objects.create(name="Vikram Shah", email="vikram@example.com")
    other_hospital = Hospital.objects.create(name="Lakeside", latitude=12.93, longitude=77.62)
    assert book(patient_user, doctor, hospital, at(1))["token"] == 1
    assert book(patient_user, other_doctor, hospital, at(1))["token"] == 1
    assert book(patient_user, doctor, other_hospital, at(1))["token"] == 1
    assert book(patient_user, doctor, hospital, at(2))["token"] == 1


def test_cancelled_token_is_not_reused(patient_user, doctor, hospital):
    first = book(patient_user, doctor, hospital, at(1))
    assert first["token"] == 1
    booking.cancel_appointment(first["appointment_id"])
    second = book(patient_user, doctor, hospital, at(1, 12))
    assert second["token"] == 2


def test_fourth_booking_same_day_is_rejected(patient_user, doctor, hospital):
    for hour in (9, 10, 11):
        book(patient_user, doctor, hospital, at(1, hour))
    with pytest.raises(QuotaExceededError) as exc:
        book(patient_user, doctor, hospital, at(1, 16))
    assert "up to 3 appointments per day" in str(exc.value.detail)
    assert Appointment.objects.count() == 3
    # the rejected booking leaves no patient row behind
    assert Patient.objects.count() == 3
    assert book(patient_user, doctor, hospital, at(2, 9))["token"] == 1


def test_quota_counts_only_the_booking_users_patients(patient_user, doctor, hospital):
    other = User.objects.create_user(username="p2", password="x", role="patient")
    for hour in (9, 10, 11):
        book(other, doctor, hospital, at(1, hour))
    result = book(patient_user, doctor, hospital, at(1, 12))
    assert result["token"] == 4


def test_daily_limit_is_configurable(settings, patient_user, doctor, hospital):
    settings.BOOKING_DAILY_LIMIT = 1
    book(patient_user, doctor, hospital, at(1))
    with pytest.raises(QuotaExceededError):
        book(patient_user, doctor, hospital, at(1, 12))


@pytest.mark.parametrize("missing", ["doctor_id", "hospital_id", "appointment_date", "name", "phone_number"])
def test_missing_required_fields(patient_user, doctor, hospital, missing):
    kwargs = {"doctor_id": doctor.pk, "hospital_id": hospital.pk, "appointment_date": at(1)}
    patient = dict(PATIENT)
    if missing in kwargs:
        kwargs[missing] = None
    else:
        patient[missing] = ""
    with pytest.raises(ValidationError) as exc:
        booking.create_appointment(patient_user, patient=patient, **kwargs)
    assert str(exc.value.detail) == "Missing required fields."


@pytest.mark.parametrize("field, value", [("name", "   "), ("name", "<b></b>"), ("phone_number", "<i> </i>")])
def test_blank_after_cleaning_counts_as_missing(patient_user, doctor, hospital, field, value):
    patient = dict(PATIENT, **{field: value})
    with pytest.raises(ValidationError) as exc:
        booking.create_appointment(
            patient_user, doctor_id=doctor.pk, hospital_id=hospital.pk, appointment_date=at(1), patient=patient,
        )
    assert str(exc.value.detail) == "Missing required fields."
    assert not Patient.objects.exists()
    assert not Appointment.objects.exists()


def test_unknown_hospital_and_doctor(patient_user, doctor, hospital):
    with pytest.raises(NotFoundError, match="Hospital not found."):
        booking.create_appointment(patient_user, doctor_id=doctor.pk, hospital_id=9999,
                                   appointment_date=at(1), patient=dict(PATIENT))
    with pytest.raises(NotFoundError, match="Doctor not found."):
        booking.create_appointment(patient_user, doctor_id=9999, hospital_id=hospital.pk,
                                   appointment_date=at(1), patient=dict(PATIENT))


def test_unmapped_doctor_allowed_unless_mapping_required(settings, patient_user, hospital):
    stray = Doctor.objects.create(name="Stray", email="stray@example.com")
    assert book(patient_user, stray, hospital, at(1))["token"] == 1
    settings.BOOKING_REQUIRE_DOCTOR_MAPPING = True
    with pytest.raises(ValidationError):
        book(patient_user, stray, hospital, at(1, 12))


def test_cancel_twice_is_a_conflict(patient_user, doctor, hospital):
    appt_id = book(patient_user, doctor, hospital, at(1))["appointment_id"]
    booking.cancel_appointment(appt_id, reason="travel")
    with pytest.raises(ConflictError, match="Appointment already cancelled."):
        booking.cancel_appointment(appt_id)
    appt = Appointment.objects.get(pk=appt_id)
    assert appt.status == Appointment.STATUS_CANCELLED
    assert appt.cancel_reason == "travel"


def test_cancel_unknown_appointment():
    with pytest.raises(NotFoundError):
        booking.cancel_appointment(424242)


def test_status_update_is_permissive(patient_user, doctor, hospital):
    appt_id = book(patient_user, doctor, hospital, at(1))["appointment_id"]
    booking.update_appointment_status(appt_id, "cancelled")
    booking.update_appointment_status(appt_id, "pending")
    assert Appointment.objects.get(pk=appt_id).status == "pending"
    with pytest.raises(ValidationError, match="Invalid status value"):
        booking.update_appointment_status(appt_id, "done")
    with pytest.raises(NotFoundError, match="Appointment not found"):
        booking.update_appointment_status(424242, "completed")


def test_booking_endpoint_requires_auth_and_books(patient_user, doctor, hospital):
    client = APIClient()
    payload = {
        "doctor_id": doctor.pk,
        "hospital_id": hospital.pk,
        "appointment_date": "2024-03-01 10:30:00",
        "notes": "<b>first visit</b>",
        "patient": {"name": "Ravi", "phone_number": "9876543210", "date_of_birth": "1990-05-04"},
    }
    r = client.post(reverse("appointment_create"), payload, format="json")
    assert r.status_code == 401
    assert r.data["success"] is False

    r = bearer(client, patient_user).post(reverse("appointment_create"), payload, format="json")
    assert r.status_code == 200
    assert r.data["success"] is True
    assert r.data["token"] == 1
    assert r.data["patient"]["created_by"] == patient_user.pk
    assert r.data["doctor"]["id"] == doctor.pk
    assert Appointment.objects.get(pk=r.data["appointment_id"]).notes == "first visit"


def test_booking_endpoint_missing_fields_message(patient_user):
    r = bearer(APIClient(), patient_user).post(reverse("appointment_create"), {"notes": "x"}, format="json")
    assert r.status_code == 400
    assert r.data == {"success": False, "message": "Missing required fields."}


def test_cancel_endpoint(patient_user, doctor, hospital):
    appt_id = book(patient_user, doctor, hospital, at(1))["appointment_id"]
    client = APIClient()
    url = reverse("appointment_cancel", args=[appt_id])
    r = client.put(url, {}, format="json")
    assert r.status_code == 200
    r = client.put(url, {}, format="json")
    assert r.status_code == 400
    assert r.data["message"] == "Appointment already cancelled."


def test_cancel_endpoint_with_ownership_check(settings, patient_user, doctor, hospital):
    settings.APPOINTMENT_OWNERSHIP_CHECK = True
    appt_id = book(patient_user, doctor, hospital, at(1))["appointment_id"]
    url = reverse("appointment_cancel", args=[appt_id])

    assert APIClient().put(url, {}, format="json").status_code == 401
    stranger = User.objects.create_user(username="p2", password="x", role="patient")
    assert bearer(APIClient(), stranger).put(url, {}, format="json").status_code == 403
    assert bearer(APIClient(), patient_user).put(url, {}, format="json").status_code == 200


def test_status_endpoint_with_ownership_check(settings, patient_user, desk_user, doctor, hospital):
    settings.APPOINTMENT_OWNERSHIP_CHECK = True
    appt_id = book(patient_user, doctor, hospital, at(1))["appointment_id"]
    url = reverse("appointment_status", args=[appt_id])
    assert bearer(APIClient(), patient_user).put(url, {"status": "completed"}, format="json").status_code == 403
    r = bearer(APIClient(), desk_user).put(url, {"status": "completed"}, format="json")
    assert r.status_code == 200
    assert r.data["message"] == "Status updated to completed"


def book_concurrently(users, doctor, hospital, when):
    """Book once per user from parallel threads; quota rejections are returned, not raised."""
    barrier = threading.Barrier(len(users))

    def attempt(user):
        barrier.wait()
        try:
            return book(user, doctor, hospital, when)
        except QuotaExceededError as exc:
            return exc
        finally:
            connection.close()

    with ThreadPoolExecutor(max_workers=len(users)) as pool:
        return list(pool.map(attempt, users))


@pytest.mark.django_db(transaction=True)
def test_parallel_bookings_get_distinct_consecutive_tokens(doctor, hospital):
    users = [User.objects.create_user(username=f"p{i}", password="x") for i in range(8)]
    results = book_concurrently(users, doctor, hospital, at(1))
    assert sorted(r["token"] for r in results) == list(range(1, 9))
    counter = TokenCounter.objects.get(doctor=doctor, hospital=hospital, day=datetime.date(2024, 3, 1))
    assert counter.last_token == 8


@pytest.mark.django_db(transaction=True)
def test_parallel_bookings_respect_the_daily_quota(patient_user, doctor, hospital):
    results = book_concurrently([patient_user] * 6, doctor, hospital, at(1))
    booked = [r for r in results if isinstance(r, dict)]
    rejected = [r for r in results if isinstance(r, QuotaExceededError)]
    assert len(booked) == 3
    assert len(rejected) == 3
    assert sorted(r["token"] for r in booked) == [1, 2, 3]
    assert Appointment.objects.count() == 3
    assert Patient.objects.count() == 3
