import pytest
from django.core.management import call_command

from care.models import Doctor, DoctorSchedule, Hospital, User

pytestmark = pytest.mark.django_db


def test_seed_directory_is_idempotent():
    call_command("seed_directory", "--password", "demo-pass-1")
    call_command("seed_directory")
    assert Hospital.objects.count() == 2
    assert Doctor.objects.count() == 3
    assert DoctorSchedule.objects.count() == 9
    admin = User.objects.get(username="admin1")
    assert admin.role == User.ROLE_ADMIN
    assert admin.check_password("demo-pass-1")
