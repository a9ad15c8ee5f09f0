"""
Django admin registrations for the care models.

Gives superusers a browsable view of the directory and bookings under
``/admin/``.  Tokens and appointment keys are read-only so the booking
invariants cannot be broken by hand edits.
"""

from django.contrib import admin

from .models import (
    Advertisement,
    Appointment,
    Department,
    Doctor,
    DoctorFee,
    DoctorHospital,
    DoctorReview,
    DoctorSchedule,
    Hospital,
    HospitalImage,
    Owner,
    Patient,
    TokenCounter,
    User,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'email', 'phone_number', 'is_staff', 'is_superuser')
    list_filter = ('role',)
    search_fields = ('username', 'email', 'phone_number')


@admin.register(Owner)
class OwnerAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'email', 'phone_number')
    search_fields = ('name', 'email', 'phone_number')


class HospitalImageInline(admin.TabularInline):
    model = HospitalImage
    extra = 0


@admin.register(Hospital)
class HospitalAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'category', 'status', 'latitude', 'longitude', 'created_at')
    list_filter = ('status', 'category')
    search_fields = ('name', 'address')
    inlines = [HospitalImageInline]


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'hospital', 'head_of_department')
    search_fields = ('name',)


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'specialization', 'email', 'phone_number')
    search_fields = ('name', 'email')


@admin.register(DoctorHospital)
class DoctorHospitalAdmin(admin.ModelAdmin):
    list_display = ('doctor', 'hospital', 'department')
    list_filter = ('hospital',)


admin.site.register(DoctorSchedule)
admin.site.register(DoctorReview)
admin.site.register(DoctorFee)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'phone_number', 'created_by', 'created_at')
    search_fields = ('name', 'phone_number')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'doctor', 'hospital', 'patient_name', 'appointment_date', 'token', 'status')
    list_filter = ('status', 'hospital')
    readonly_fields = ('doctor', 'hospital', 'patient', 'appointment_date', 'token')


@admin.register(TokenCounter)
class TokenCounterAdmin(admin.ModelAdmin):
    list_display = ('doctor', 'hospital', 'day', 'last_token')
    readonly_fields = ('doctor', 'hospital', 'day', 'last_token')


@admin.register(Advertisement)
class AdvertisementAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'is_active', 'created_at')
    list_filter = ('is_active',)
