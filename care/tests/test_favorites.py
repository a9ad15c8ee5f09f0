import pytest
from django.urls import reverse
from rest_framework.test import APIClient, APITestCase

from care.models import Doctor, DoctorHospital, FavoriteDoctor, FavoriteHospital, Hospital, User
from care.services import favorites

from .conftest import bearer

pytestmark = pytest.mark.django_db


def test_toggling_a_doctor_twice_restores_state(patient_user, doctor, hospital):
    first = favorites.toggle_favorite_doctor(patient_user, doctor.id, hospital.id)
    assert first == {"status": True, "message": "Doctor added to favorites"}
    assert FavoriteDoctor.objects.filter(user=patient_user).count() == 1
    second = favorites.toggle_favorite_doctor(patient_user, doctor.id, hospital.id)
    assert second == {"status": False, "message": "Doctor removed from favorites"}
    assert not FavoriteDoctor.objects.exists()


def test_doctor_favorites_are_per_hospital(patient_user, doctor, hospital):
    other = Hospital.objects.create(name="Lakeside")
    favorites.toggle_favorite_doctor(patient_user, doctor.id, hospital.id)
    favorites.toggle_favorite_doctor(patient_user, doctor.id, other.id)
    assert FavoriteDoctor.objects.filter(user=patient_user, doctor=doctor).count() == 2


def test_toggling_a_hospital_twice_restores_state(patient_user, hospital):
    assert favorites.toggle_favorite_hospital(patient_user, hospital.id)["status"] is True
    assert favorites.toggle_favorite_hospital(patient_user, hospital.id)["status"] is False
    assert not FavoriteHospital.objects.exists()


def test_list_favorites_is_scoped_to_the_user(patient_user, doctor, hospital):
    someone = User.objects.create_user(username="p2", password="x")
    FavoriteHospital.objects.create(user=someone, hospital=hospital)
    favorites.toggle_favorite_doctor(patient_user, doctor.id, hospital.id)
    result = favorites.list_favorites(patient_user)
    assert [d["doctor_name"] for d in result["doctors"]] == ["Anita Rao"]
    assert result["doctors"][0]["hospital_name"] == "City General"
    assert result["hospitals"] == []


class FavoriteEndpointTests(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="fav", password="P@ssw0rd1")
        self.hospital = Hospital.objects.create(name="City General")
        self.doctor = Doctor.objects.create(name="Anita Rao")
        DoctorHospital.objects.create(doctor=self.doctor, hospital=self.hospital)
        bearer(self.client, self.user)

    def test_requires_authentication(self):
        r = APIClient().post(reverse("favorite_hospital_toggle"), {"hospital_id": self.hospital.id}, format="json")
        self.assertEqual(r.status_code, 401)

    def test_toggle_and_list(self):
        r = self.client.post(
            reverse("favorite_doctor_toggle"),
            {"doctor_id": self.doctor.id, "hospital_id": self.hospital.id},
            format="json",
        )
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.data["status"])
        r = self.client.post(reverse("favorite_hospital_toggle"), {"hospital_id": self.hospital.id}, format="json")
        self.assertEqual(r.data["message"], "Hospital added to favorites")

        r = self.client.get(reverse("favorites_all"))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(r.data["doctors"]), 1)
        self.assertEqual(r.data["hospitals"][0]["hospital_id"], self.hospital.id)

    def test_unknown_doctor(self):
        r = self.client.post(
            reverse("favorite_doctor_toggle"), {"doctor_id": 999, "hospital_id": self.hospital.id}, format="json",
        )
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.data["message"], "Doctor not found.")
