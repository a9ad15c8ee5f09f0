from rest_framework import serializers

from care.models import Appointment

DATETIME_INPUTS = ['iso-8601', '%Y-%m-%d %H:%M:%S', '%Y-%m-%d %H:%M', '%Y-%m-%d']


class PatientSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    gender = serializers.CharField(max_length=20, required=False, allow_blank=True)
    phone_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)


class AppointmentCreateSerializer(serializers.Serializer):
    """Booking payload.

    Presence of the required keys is checked by the booking service so
    that every missing-field case yields the same message.
    """
    doctor_id = serializers.IntegerField(min_value=1, required=False)
    hospital_id = serializers.IntegerField(min_value=1, required=False)
    appointment_date = serializers.DateTimeField(required=False, input_formats=DATETIME_INPUTS)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    patient = PatientSerializer(required=False)


class CancelSerializer(serializers.Serializer):
    cancel_reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class StatusSerializer(serializers.Serializer):
    status = serializers.CharField(required=False, allow_blank=True, default='')


class MyAppointmentsQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=[c for c, _ in Appointment.STATUS_CHOICES], required=False)


class AppointmentListQuerySerializer(serializers.Serializer):
    hospital_id = serializers.IntegerField(min_value=1, required=False)
    doctor_id = serializers.IntegerField(min_value=1, required=False)
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, required=False, default=10)


class FavoriteDoctorSerializer(serializers.Serializer):
    doctor_id = serializers.IntegerField(min_value=1)
    hospital_id = serializers.IntegerField(min_value=1)


class FavoriteHospitalSerializer(serializers.Serializer):
    hospital_id = serializers.IntegerField(min_value=1)
