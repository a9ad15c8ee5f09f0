"""
URL mappings for the healthdesk API.

Every path is served without a trailing slash (``APPEND_SLASH`` is off)
so that the mobile and admin clients can call the same paths they
always used.
"""
from django.urls import path, include

from .auth_views import login_view, jwt_refresh_view, jwt_logout_view
from .views import (
    ads,
    admin_hospitals,
    appointments,
    departments,
    doctors,
    favorites,
    health,
    roster,
    schedules,
    search,
    users,
)


urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),

    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout'),
    path('api/users/me', users.me, name='users_me'),

    # Discovery
    path('api/hospitals/nearby', search.nearby_hospitals, name='hospitals_nearby'),
    path('api/details/<int:hospital_id>', search.hospital_details, name='hospital_details'),
    path('api/hospitals/<int:hospital_id>/doctors', doctors.hospital_doctors, name='hospital_doctors'),
    path('api/hospitals/<int:hospital_id>/doctors/<int:doctor_id>/details', doctors.doctor_details,
         name='doctor_details'),

    # Appointments
    path('api/appointments', appointments.create_appointment, name='appointment_create'),
    path('api/appointments/details/<int:appointment_id>', appointments.appointment_detail,
         name='appointment_detail'),
    path('api/appointments/mine', appointments.my_appointments, name='appointments_mine'),
    path('api/appointments/<int:appointment_id>/cancel', appointments.cancel_appointment,
         name='appointment_cancel'),
    path('api/appointments/<int:appointment_id>/status', appointments.update_appointment_status,
         name='appointment_status'),
    path('api/doctor/appointments', appointments.doctor_appointments, name='doctor_appointments'),

    # Favorites
    path('api/favorites/doctors/toggle', favorites.toggle_favorite_doctor, name='favorite_doctor_toggle'),
    path('api/favorites/hospitals/toggle', favorites.toggle_favorite_hospital, name='favorite_hospital_toggle'),
    path('api/favorites/all', favorites.all_favorites, name='favorites_all'),

    # Ads
    path('api/ads/active', ads.active_ads, name='ads_active'),
    path('api/admin/ads', ads.admin_ads, name='admin_ads'),
    path('api/admin/ads/<int:ad_id>/toggle', ads.toggle_ad, name='admin_ad_toggle'),
    path('api/admin/ads/<int:ad_id>', ads.delete_ad, name='admin_ad_delete'),

    # Administrator hospital management
    path('api/admin/hospitals', admin_hospitals.hospitals, name='admin_hospitals'),
    path('api/admin/hospitals/<int:hospital_id>', admin_hospitals.hospital_detail, name='admin_hospital_detail'),
    path('api/admin/owners/<int:owner_id>/hospitals', admin_hospitals.owner_hospitals, name='owner_hospitals'),

    # Hospital desk
    path('api/hospital/departments', departments.departments, name='departments'),
    path('api/hospital/departments/<int:department_id>', departments.department_detail, name='department_detail'),
    path('api/hospital/departments/hospital/<int:hospital_id>', departments.hospital_departments,
         name='hospital_departments'),
    path('api/hospital/hospitals/<int:hospital_id>/images', roster.hospital_images, name='hospital_images'),
    path('api/hospital/doctors', roster.register_doctor, name='register_doctor'),
    path('api/hospital/hospitals/<int:hospital_id>/doctors/<int:doctor_id>', roster.remove_doctor,
         name='remove_doctor'),
    path('api/hospital/doctor-schedules', schedules.create_schedule, name='schedule_create'),
    path('api/hospital/doctor-schedules/<int:schedule_id>', schedules.schedule_detail, name='schedule_detail'),
    path('api/hospital/doctor-schedules/doctor/<int:doctor_id>', schedules.doctor_schedules,
         name='doctor_schedules'),
]
