# services/booking-service/src/apps/api/serializers/service_serializers.py
"""
Service Serializers

Listings with their timeslot catalog, and timeslot change requests.
"""

from decimal import Decimal

from rest_framework import serializers

from apps.core.models import Service


class TimeslotListField(serializers.ListField):
    """List of slot labels; blanks rejected, duplicates collapsed."""

    child = serializers.CharField(max_length=20, allow_blank=False, trim_whitespace=True)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        return list(dict.fromkeys(value))


class ServiceSerializer(serializers.ModelSerializer):
    """Service with its active slot labels."""

    status_display = serializers.CharField(
        source='get_status_display',
        read_only=True
    )
    timeslots = serializers.SerializerMethodField()

    class Meta:
        model = Service
        fields = [
            'id', 'provider_id', 'type_id', 'name', 'description',
            'price', 'duration', 'status', 'status_display',
            'timeslots', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_timeslots(self, obj) -> list:
        return sorted(t.slot for t in obj.timeslots.all() if t.is_active)


class ServiceDetailSerializer(ServiceSerializer):

    class Meta(ServiceSerializer.Meta):
        fields = ServiceSerializer.Meta.fields + [
            'reviewed_by', 'reviewed_at', 'rejection_reason',
        ]
        read_only_fields = fields


class ServiceCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0')
    )
    duration = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    type_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    timeslots = TimeslotListField(required=False, default=list)


class ServiceUpdateSerializer(serializers.Serializer):
    """Descriptive fields and/or the full desired slot set."""

    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0'),
        required=False
    )
    duration = serializers.CharField(max_length=50, required=False, allow_blank=True)
    type_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    timeslots = TimeslotListField(required=False)


class TimeslotCheckSerializer(serializers.Serializer):
    timeslots = TimeslotListField()


class ServiceRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')
