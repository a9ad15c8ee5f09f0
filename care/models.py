"""
Database models for the healthdesk backend.

These models capture the hospital directory (owners, hospitals,
departments, doctors and their per-hospital rosters), the booking side
(patients, appointments and the per-day token counters that serialize
token assignment) and the user-facing extras such as favorites and
advertisements.  Field names follow the JSON payloads returned by the
API so that views can build responses without renaming.
"""
from __future__ import annotations

import datetime
import os
import uuid

from django.contrib.auth.models import AbstractUser
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


def _dated_path(folder: str, filename: str) -> str:
    ext = os.path.splitext(filename)[1]
    return f"{folder}/{datetime.date.today().strftime('%Y/%m')}/{uuid.uuid4().hex}{ext}"


def hospital_upload(instance, filename: str) -> str:
    return _dated_path("hospital", filename)


def doctor_upload(instance, filename: str) -> str:
    return _dated_path("doctor_images", filename)


def profile_upload(instance, filename: str) -> str:
    return _dated_path("profile", filename)


def advertisement_upload(instance, filename: str) -> str:
    return _dated_path("advertisement", filename)


class User(AbstractUser):
    """Custom user model carrying a role and contact details.

    Roles mirror the actors of the system: administrators, hospital
    owners, doctors, hospital staff accounts and patients (the default
    for self-registered users).  Owners and doctors get a user row
    implicitly when an administrator registers them.
    """
    ROLE_ADMIN = 'admin'
    ROLE_OWNER = 'owner'
    ROLE_DOCTOR = 'doctor'
    ROLE_HOSPITAL = 'hospital'
    ROLE_PATIENT = 'patient'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_OWNER, 'Owner'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_HOSPITAL, 'Hospital'),
        (ROLE_PATIENT, 'Patient'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_PATIENT)
    phone_number = models.CharField(max_length=20, blank=True, null=True, db_index=True)
    image = models.FileField(upload_to=profile_upload, max_length=512, blank=True, null=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Owner(models.Model):
    name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(blank=True, null=True, db_index=True)
    phone_number = models.CharField(max_length=20, blank=True, null=True, db_index=True)
    address = models.TextField(blank=True)

    def __str__(self) -> str:
        return self.name or f"Owner #{self.pk}"


class Hospital(models.Model):
    """A hospital listed in the directory.

    ``latitude``/``longitude`` drive the nearby search.  ``owner`` points
    at the primary owner; the full ownership set is kept in
    :class:`HospitalOwner`.
    """
    name = models.CharField(max_length=255)
    logo = models.FileField(upload_to=hospital_upload, max_length=512, blank=True, null=True)
    category = models.CharField(max_length=100, blank=True)
    address = models.TextField(blank=True)
    phone_number = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    established_date = models.DateField(null=True, blank=True)
    number_of_beds = models.PositiveIntegerField(null=True, blank=True)
    website = models.URLField(blank=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    owner = models.ForeignKey(Owner, null=True, blank=True, on_delete=models.SET_NULL, related_name='hospitals')
    status = models.CharField(max_length=20, default='active', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['latitude', 'longitude'], name='care_hospital_geo_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.name} (#{self.pk})"


class HospitalOwner(models.Model):
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='ownerships')
    owner = models.ForeignKey(Owner, on_delete=models.CASCADE, related_name='ownerships')

    class Meta:
        unique_together = [('hospital', 'owner')]


class HospitalImage(models.Model):
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='images')
    image = models.FileField(upload_to=hospital_upload, max_length=512)
    description = models.CharField(max_length=255, blank=True, null=True)

    def __str__(self) -> str:
        return f"img {self.pk} hospital={self.hospital_id}"


class Department(models.Model):
    """A department inside one hospital."""
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='departments')
    name = models.CharField(max_length=255)
    head_of_department = models.CharField(max_length=255, blank=True)
    contact_number = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)

    def __str__(self) -> str:
        return f"{self.name} @ {self.hospital_id}"


class Doctor(models.Model):
    name = models.CharField(max_length=255)
    specialization = models.CharField(max_length=255, blank=True)
    phone_number = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True, db_index=True)
    image = models.FileField(upload_to=doctor_upload, max_length=512, blank=True, null=True)
    user = models.OneToOneField(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='doctor_profile')

    def __str__(self) -> str:
        return f"Dr. {self.name} (#{self.pk})"


class DoctorHospital(models.Model):
    """Maps a doctor to a hospital.

    The department affiliation is scoped per hospital, so it lives on the
    mapping rather than on :class:`Doctor`.
    """
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='hospital_links')
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='doctor_links')
    department = models.ForeignKey(
        Department, null=True, blank=True, on_delete=models.SET_NULL, related_name='doctor_links'
    )

    class Meta:
        unique_together = [('doctor', 'hospital')]

    def __str__(self) -> str:
        return f"doctor={self.doctor_id} hospital={self.hospital_id} dept={self.department_id}"


class DoctorDepartment(models.Model):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='department_links')
    department = models.ForeignKey(Department, on_delete=models.CASCADE, related_name='department_doctors')

    class Meta:
        unique_together = [('doctor', 'department')]


class DoctorImage(models.Model):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='images')
    image = models.FileField(upload_to=doctor_upload, max_length=512)
    description = models.CharField(max_length=255, blank=True, null=True)


class DoctorSchedule(models.Model):
    """A weekly recurring consultation slot."""
    DAYS_OF_WEEK = [
        'Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday',
    ]
    DAY_CHOICES = [(d, d) for d in DAYS_OF_WEEK]

    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='schedules')
    hospital = models.ForeignKey(Hospital, null=True, blank=True, on_delete=models.CASCADE, related_name='schedules')
    day_of_week = models.CharField(max_length=10, choices=DAY_CHOICES)
    start_time = models.TimeField()
    end_time = models.TimeField()
    notes = models.CharField(max_length=255, blank=True)

    def __str__(self) -> str:
        return f"{self.doctor_id} {self.day_of_week} {self.start_time}-{self.end_time}"


class DoctorReview(models.Model):
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='reviews')
    patient_name = models.CharField(max_length=255, blank=True)
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)


class DoctorFee(models.Model):
    doctor = models.OneToOneField(Doctor, on_delete=models.CASCADE, related_name='fee')
    consultation_fee = models.DecimalField(max_digits=10, decimal_places=2)


class Patient(models.Model):
    """Patient details captured with a booking.

    A fresh row is created for every booking and tagged with the user who
    booked it; ownership checks and the daily quota go through
    ``created_by``.
    """
    name = models.CharField(max_length=255)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=20, blank=True)
    phone_number = models.CharField(max_length=20)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)
    created_by = models.ForeignKey(User, null=True, on_delete=models.SET_NULL, related_name='patients')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.name} (#{self.pk})"


class Appointment(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='appointments')
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='appointments')
    hospital = models.ForeignKey(Hospital, on_delete=models.PROTECT, related_name='appointments')
    patient_name = models.CharField(max_length=255)
    appointment_date = models.DateTimeField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    notes = models.TextField(blank=True)
    cancel_reason = models.CharField(max_length=255, blank=True)
    token = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['doctor', 'hospital', 'appointment_date'], name='care_appt_token_key_idx'),
            models.Index(fields=['appointment_date'], name='care_appt_date_idx'),
        ]

    def __str__(self) -> str:
        return f"appt {self.pk} token={self.token} ({self.status})"


class TokenCounter(models.Model):
    """Last token handed out for one doctor at one hospital on one day.

    Booking locks this row before reading the current maximum token so
    concurrent bookings for the same key are assigned one at a time.
    """
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='token_counters')
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='token_counters')
    day = models.DateField()
    last_token = models.PositiveIntegerField(default=0)

    class Meta:
        unique_together = [('doctor', 'hospital', 'day')]

    def __str__(self) -> str:
        return f"tokens d={self.doctor_id} h={self.hospital_id} {self.day}: {self.last_token}"


class FavoriteDoctor(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='favorite_doctors')
    doctor = models.ForeignKey(Doctor, on_delete=models.CASCADE, related_name='favorited_by')
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='favorite_doctor_entries')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [('user', 'doctor', 'hospital')]


class FavoriteHospital(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='favorite_hospitals')
    hospital = models.ForeignKey(Hospital, on_delete=models.CASCADE, related_name='favorited_by')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [('user', 'hospital')]


class Advertisement(models.Model):
    """A promotional banner shown on the client."""
    title = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    image = models.FileField(upload_to=advertisement_upload, max_length=512)
    target_url = models.URLField(blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.title[:30] or f"Ad #{self.pk}"
