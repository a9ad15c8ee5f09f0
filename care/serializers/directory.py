from rest_framework import serializers

from care.models import DoctorSchedule


class HospitalUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)
    phone_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    established_date = serializers.DateField(required=False, allow_null=True)
    number_of_beds = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    website = serializers.URLField(required=False, allow_blank=True)
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False, allow_null=True)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False, allow_null=True)
    status = serializers.CharField(max_length=20, required=False)


class HospitalCreateSerializer(HospitalUpdateSerializer):
    name = serializers.CharField(max_length=255)
    owner_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    owner_email = serializers.EmailField(required=False, allow_blank=True)
    owner_phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    owner_address = serializers.CharField(required=False, allow_blank=True)


class DepartmentSerializer(serializers.Serializer):
    hospital_id = serializers.IntegerField(min_value=1)
    name = serializers.CharField(max_length=255)
    head_of_department = serializers.CharField(max_length=255, required=False, allow_blank=True)
    contact_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)


class DepartmentUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    head_of_department = serializers.CharField(max_length=255, required=False, allow_blank=True)
    contact_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)


class DoctorRegisterSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    hospital_id = serializers.IntegerField(min_value=1, required=False)
    specialization = serializers.CharField(max_length=255, required=False, allow_blank=True)
    phone_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    department_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)


class ScheduleSerializer(serializers.Serializer):
    doctor_id = serializers.IntegerField(min_value=1)
    hospital_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    day_of_week = serializers.ChoiceField(choices=DoctorSchedule.DAYS_OF_WEEK)
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True)


class ScheduleUpdateSerializer(serializers.Serializer):
    day_of_week = serializers.ChoiceField(choices=DoctorSchedule.DAYS_OF_WEEK, required=False)
    start_time = serializers.TimeField(required=False)
    end_time = serializers.TimeField(required=False)
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True)


class AdvertisementSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    target_url = serializers.URLField(required=False, allow_blank=True)
