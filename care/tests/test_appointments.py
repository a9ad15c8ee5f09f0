import datetime

import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from care.models import Doctor, User
from care.services import booking
from care.services.appointments import list_appointments, list_my_appointments

from .conftest import bearer

pytestmark = pytest.mark.django_db


def _book(user, doctor, hospital, day, hour=10):
    return booking.create_appointment(
        user,
        doctor_id=doctor.id,
        hospital_id=hospital.id,
        appointment_date=timezone.make_aware(datetime.datetime(2024, 3, day, hour)),
        patient={"name": f"Patient {day}-{hour}", "phone_number": "98765"},
    )["appointment_id"]


@pytest.fixture
def history(patient_user, doctor, hospital):
    ids = [_book(patient_user, doctor, hospital, day) for day in (1, 5, 9)]
    booking.cancel_appointment(ids[1])
    return ids


def test_my_appointments_newest_first(patient_user, history):
    rows = list_my_appointments(patient_user)
    assert [r["appointment_id"] for r in rows] == list(reversed(history))
    assert rows[0]["doctor"]["name"] == "Anita Rao"
    assert rows[0]["hospital"]["name"] == "City General"


def test_my_appointments_date_range_is_inclusive(patient_user, history):
    rows = list_my_appointments(patient_user, start_date=datetime.date(2024, 3, 5),
                                end_date=datetime.date(2024, 3, 9))
    assert [r["appointment_id"] for r in rows] == [history[2], history[1]]


def test_my_appointments_status_filter(patient_user, history):
    rows = list_my_appointments(patient_user, status="cancelled")
    assert [r["appointment_id"] for r in rows] == [history[1]]


def test_my_appointments_excludes_other_users(history, doctor, hospital):
    other = User.objects.create_user(username="p2", password="x")
    _book(other, doctor, hospital, 2)
    assert len(list_my_appointments(other)) == 1


def test_appointment_detail_only_for_the_booker(patient_user, history):
    url = reverse("appointment_detail", args=[history[0]])
    r = bearer(APIClient(), patient_user).get(url)
    assert r.status_code == 200
    assert r.data["appointment"]["token"] == 1
    assert r.data["appointment"]["patient"]["name"] == "Patient 1-10"

    stranger = User.objects.create_user(username="p2", password="x")
    r = bearer(APIClient(), stranger).get(url)
    assert r.status_code == 404
    assert r.data["message"] == "Appointment not found or access denied."


def test_mine_endpoint_validates_status(patient_user, history):
    client = bearer(APIClient(), patient_user)
    r = client.get(reverse("appointments_mine"), {"start_date": "2024-03-02"})
    assert [a["appointment_id"] for a in r.data["appointments"]] == [history[2], history[1]]
    assert client.get(reverse("appointments_mine"), {"status": "lost"}).status_code == 400


def test_staff_listing_filters_and_pages(patient_user, history, hospital):
    other = Doctor.objects.create(name="Vikram Shah")
    extra = _book(patient_user, other, hospital, 12)

    everything = list_appointments(hospital_id=hospital.id, limit=2)
    assert everything["total"] == 4
    assert [a["appointment_id"] for a in everything["appointments"]] == [extra, history[2]]

    second = list_appointments(hospital_id=hospital.id, page=2, limit=2)
    assert [a["appointment_id"] for a in second["appointments"]] == [history[1], history[0]]

    only_vikram = list_appointments(doctor_id=other.id)
    assert [a["doctor_name"] for a in only_vikram["appointments"]] == ["Vikram Shah"]


def test_doctor_appointments_endpoint(history, doctor):
    r = APIClient().get(reverse("doctor_appointments"), {"doctor_id": doctor.id})
    assert r.status_code == 200
    assert r.data["total"] == 3
    statuses = {a["appointment_id"]: a["status"] for a in r.data["appointments"]}
    assert statuses[history[1]] == "cancelled"
