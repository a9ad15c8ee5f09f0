import datetime

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from care.models import (
    Department,
    Doctor,
    DoctorDepartment,
    DoctorFee,
    DoctorHospital,
    DoctorReview,
    DoctorSchedule,
    FavoriteDoctor,
    Hospital,
)
from care.services.doctors import get_doctor_detail, list_doctors_for_hospital

from .conftest import bearer

pytestmark = pytest.mark.django_db


@pytest.fixture
def roster(hospital, department, doctor):
    ortho = Department.objects.create(hospital=hospital, name="Orthopedics")
    DoctorDepartment.objects.create(doctor=doctor, department=department)
    vikram = Doctor.objects.create(name="Vikram Shah", email="vikram@example.com")
    DoctorHospital.objects.create(doctor=vikram, hospital=hospital, department=ortho)
    DoctorDepartment.objects.create(doctor=vikram, department=ortho)
    bala = Doctor.objects.create(name="Bala Murthy", email="bala@example.com")
    DoctorHospital.objects.create(doctor=bala, hospital=hospital)
    # practising elsewhere only
    Doctor.objects.create(name="Outsider", email="out@example.com")
    return {"anita": doctor, "vikram": vikram, "bala": bala, "cardio": department, "ortho": ortho}


def test_lists_mapped_doctors_by_name(hospital, roster):
    result = list_doctors_for_hospital(hospital.id)
    assert result["total"] == 3
    assert [d["name"] for d in result["doctors"]] == ["Anita Rao", "Bala Murthy", "Vikram Shah"]
    names = {d["name"]: d["department_name"] for d in result["doctors"]}
    assert names == {"Anita Rao": "Cardiology", "Bala Murthy": None, "Vikram Shah": "Orthopedics"}


def test_filters_by_department_and_name(hospital, roster):
    by_dept = list_doctors_for_hospital(hospital.id, department_id=roster["ortho"].id)
    assert [d["id"] for d in by_dept["doctors"]] == [roster["vikram"].id]
    by_name = list_doctors_for_hospital(hospital.id, name="RAO")
    assert [d["id"] for d in by_name["doctors"]] == [roster["anita"].id]


def test_doctor_in_several_departments_appears_once(hospital, roster):
    DoctorDepartment.objects.create(doctor=roster["anita"], department=roster["ortho"])
    result = list_doctors_for_hospital(hospital.id)
    assert result["total"] == 3
    anita = next(d for d in result["doctors"] if d["id"] == roster["anita"].id)
    assert anita["department_name"] == "Cardiology"


def test_pagination_and_favorites(hospital, roster, patient_user):
    FavoriteDoctor.objects.create(user=patient_user, doctor=roster["vikram"], hospital=hospital)
    page2 = list_doctors_for_hospital(hospital.id, page=2, limit=2, user=patient_user)
    assert page2["total"] == 3
    assert [(d["name"], d["is_favorite"]) for d in page2["doctors"]] == [("Vikram Shah", True)]


def test_hospital_doctors_endpoint(hospital, roster, patient_user):
    r = bearer(APIClient(), patient_user).get(reverse("hospital_doctors", args=[hospital.id]), {"name": "shah"})
    assert r.status_code == 200
    assert r.data["success"] is True
    assert [d["id"] for d in r.data["doctors"]] == [roster["vikram"].id]


def test_doctor_detail(hospital, department, doctor):
    DoctorFee.objects.create(doctor=doctor, consultation_fee="600.00")
    for day, start in (("Friday", 9), ("Monday", 14), ("Monday", 9), ("Sunday", 10)):
        DoctorSchedule.objects.create(
            doctor=doctor, hospital=hospital, day_of_week=day,
            start_time=datetime.time(start, 0), end_time=datetime.time(start + 2, 0),
        )
    for rating in (5, 4, 4):
        DoctorReview.objects.create(doctor=doctor, patient_name="P", rating=rating)

    data = get_doctor_detail(hospital.id, doctor.id)

    assert data["hospital"] == {
        "id": hospital.id, "name": "City General", "address": "MG Road", "phone": "", "email": "",
    }
    assert data["departments"] == [{"id": department.id, "name": "Cardiology"}]
    assert data["consultation_fee"] == "600.00"
    assert data["average_rating"] == 4.3
    assert data["total_reviews"] == 3
    assert [(s["day_of_week"], s["start_time"]) for s in data["schedules"]] == [
        ("Sunday", "10:00:00"), ("Monday", "09:00:00"), ("Monday", "14:00:00"), ("Friday", "09:00:00"),
    ]


def test_doctor_detail_without_extras(hospital):
    bare = Doctor.objects.create(name="New Joiner")
    DoctorHospital.objects.create(doctor=bare, hospital=hospital)
    data = get_doctor_detail(hospital.id, bare.id)
    assert data["departments"] == []
    assert data["consultation_fee"] is None
    assert data["average_rating"] is None
    assert data["schedules"] == [] and data["reviews"] == []


def test_doctor_detail_endpoint_requires_mapping(doctor):
    elsewhere = Hospital.objects.create(name="Lakeside")
    r = APIClient().get(reverse("doctor_details", args=[elsewhere.id, doctor.id]))
    assert r.status_code == 404
    assert r.data == {"success": False, "message": "Doctor not found for this hospital."}
