"""
Management command to seed a local database with a small directory.

Creates demo accounts (admin, hospital desk, patient), two hospitals
with departments, doctors, fees and weekly schedules.  Safe to run
repeatedly: existing rows are looked up by their natural keys.
"""
import datetime

from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from django.db import transaction

from care.models import (
    Department,
    Doctor,
    DoctorDepartment,
    DoctorFee,
    DoctorHospital,
    DoctorSchedule,
    Hospital,
    HospitalOwner,
    Owner,
    User,
)

DEMO_USERS = [
    ("admin1", User.ROLE_ADMIN),
    ("desk1", User.ROLE_HOSPITAL),
    ("patient1", User.ROLE_PATIENT),
]

HOSPITALS = [
    {
        "name": "City General Hospital",
        "category": "General",
        "address": "12 MG Road, Bengaluru",
        "latitude": 12.9756,
        "longitude": 77.6050,
        "departments": ["Cardiology", "Orthopedics", "General Medicine"],
    },
    {
        "name": "Lakeside Children's Clinic",
        "category": "Pediatrics",
        "address": "4 Lake View, Bengaluru",
        "latitude": 12.9352,
        "longitude": 77.6245,
        "departments": ["Pediatrics"],
    },
]

DOCTORS = [
    ("Anita Rao", "anita.rao@example.com", "Cardiologist", "City General Hospital", "Cardiology", "600.00"),
    ("Vikram Shah", "vikram.shah@example.com", "Orthopedic Surgeon", "City General Hospital", "Orthopedics", "750.00"),
    ("Meera Iyer", "meera.iyer@example.com", "Pediatrician", "Lakeside Children's Clinic", "Pediatrics", "500.00"),
]


class Command(BaseCommand):
    help = "Seed demo users, hospitals, departments, doctors and schedules (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="demo12345", help="Password for the demo accounts.")

    @transaction.atomic
    def handle(self, *args, **opts):
        for username, role in DEMO_USERS:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"role": role, "password": make_password(opts["password"]), "is_active": True},
            )
            if not created and u.role != role:
                u.role = role
                u.save(update_fields=["role"])
            self.stdout.write(f"user: {username} ({role})")

        owner, _ = Owner.objects.get_or_create(
            email="owner@example.com", defaults={"name": "Demo Owner", "phone_number": "9000000000"},
        )

        hospitals = {}
        departments = {}
        for row in HOSPITALS:
            row = dict(row)
            dept_names = row.pop("departments")
            hospital, _ = Hospital.objects.get_or_create(name=row["name"], defaults={**row, "owner": owner})
            HospitalOwner.objects.get_or_create(hospital=hospital, owner=owner)
            hospitals[hospital.name] = hospital
            for name in dept_names:
                dept, _ = Department.objects.get_or_create(hospital=hospital, name=name)
                departments[(hospital.name, name)] = dept
            self.stdout.write(f"hospital: {hospital.name} (#{hospital.pk})")

        for name, email, specialization, hospital_name, dept_name, fee in DOCTORS:
            doctor, _ = Doctor.objects.get_or_create(
                email=email, defaults={"name": name, "specialization": specialization},
            )
            hospital = hospitals[hospital_name]
            dept = departments[(hospital_name, dept_name)]
            DoctorHospital.objects.get_or_create(doctor=doctor, hospital=hospital, defaults={"department": dept})
            DoctorDepartment.objects.get_or_create(doctor=doctor, department=dept)
            DoctorFee.objects.get_or_create(doctor=doctor, defaults={"consultation_fee": fee})
            for day in ("Monday", "Wednesday", "Friday"):
                DoctorSchedule.objects.get_or_create(
                    doctor=doctor,
                    hospital=hospital,
                    day_of_week=day,
                    start_time=datetime.time(9, 0),
                    defaults={"end_time": datetime.time(13, 0)},
                )
            self.stdout.write(f"doctor: {doctor.name} -> {hospital_name}/{dept_name}")

        self.stdout.write(self.style.SUCCESS("Directory seeded."))
