from django.conf import settings
from rest_framework import serializers


class NearbyQuerySerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False)
    radius = serializers.FloatField(min_value=0, required=False)
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, required=False, default=10)
    department = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def validate(self, attrs):
        attrs.setdefault('radius', settings.NEARBY_DEFAULT_RADIUS_KM)
        return attrs


class DoctorListQuerySerializer(serializers.Serializer):
    department_id = serializers.IntegerField(min_value=1, required=False)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, required=False, default=10)
