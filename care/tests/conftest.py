import pytest
from django.core.cache import cache
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from care.models import Department, Doctor, DoctorHospital, Hospital, User


@pytest.fixture(autouse=True)
def _isolated_environment(settings, tmp_path):
    # throttle counters live in the cache and would leak between tests
    cache.clear()
    settings.MEDIA_ROOT = tmp_path / "media"
    settings.BOOKING_DAILY_LIMIT = 3
    settings.BOOKING_REQUIRE_DOCTOR_MAPPING = False
    settings.APPOINTMENT_OWNERSHIP_CHECK = False
    yield
    cache.clear()


def bearer(client: APIClient, user: User) -> APIClient:
    token = RefreshToken.for_user(user).access_token
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.fixture
def patient_user(db):
    return User.objects.create_user(username="patient1", password="P@ssw0rd1", role=User.ROLE_PATIENT)


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(username="admin1", password="P@ssw0rd1", role=User.ROLE_ADMIN)


@pytest.fixture
def desk_user(db):
    return User.objects.create_user(username="desk1", password="P@ssw0rd1", role=User.ROLE_HOSPITAL)


@pytest.fixture
def hospital(db):
    return Hospital.objects.create(name="City General", latitude=12.9716, longitude=77.5946, address="MG Road")


@pytest.fixture
def department(hospital):
    return Department.objects.create(hospital=hospital, name="Cardiology")


@pytest.fixture
def doctor(hospital, department):
    d = Doctor.objects.create(name="Anita Rao", email="anita@example.com", specialization="Cardiologist")
    DoctorHospital.objects.create(doctor=d, hospital=hospital, department=department)
    return d
