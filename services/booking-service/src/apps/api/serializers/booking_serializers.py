# services/booking-service/src/apps/api/serializers/booking_serializers.py
"""
Booking Serializers

Serializers for booking admission and owner/provider booking views.
"""

from rest_framework import serializers
from django.utils import timezone

from apps.core.models import Booking


class BookingSerializer(serializers.ModelSerializer):
    """Base booking serializer."""

    service_id = serializers.UUIDField(read_only=True)
    service_name = serializers.CharField(source='service.name', read_only=True)
    price = serializers.DecimalField(
        source='service.price',
        max_digits=10,
        decimal_places=2,
        read_only=True
    )
    slot = serializers.CharField(read_only=True)
    owner_id = serializers.UUIDField(read_only=True)
    status_display = serializers.CharField(
        source='get_status_display',
        read_only=True
    )
    pet_ids = serializers.SerializerMethodField()
    is_active = serializers.BooleanField(read_only=True)

    class Meta:
        model = Booking
        fields = [
            'id', 'service_id', 'service_name', 'price',
            'slot', 'servedate', 'payment_method',
            'status', 'status_display', 'is_active',
            'owner_id', 'pet_ids',
            'booked_at', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_pet_ids(self, obj) -> list:
        return [str(pet.id) for pet in obj.pets.all()]


class BookingListSerializer(BookingSerializer):
    """Compact serializer for booking lists."""

    class Meta(BookingSerializer.Meta):
        fields = [
            'id', 'service_id', 'service_name', 'slot', 'servedate',
            'status', 'is_active', 'pet_ids',
        ]


class BookingDetailSerializer(BookingSerializer):
    """Detailed serializer with lifecycle timestamps and pets."""

    pets = serializers.SerializerMethodField()

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + [
            'pets', 'confirmed_at', 'completed_at', 'cancelled_at',
            'status_history',
        ]

    def get_pets(self, obj) -> list:
        return [
            {'id': str(pet.id), 'name': pet.name, 'breed': pet.breed}
            for pet in obj.pets.all()
        ]


class ProviderBookingSerializer(BookingDetailSerializer):
    """Booking as seen by the provider of the booked service."""

    owner_name = serializers.CharField(source='owner.name', read_only=True)
    owner_email = serializers.EmailField(source='owner.email', read_only=True)
    owner_phone = serializers.CharField(source='owner.phone', read_only=True)

    class Meta(BookingDetailSerializer.Meta):
        fields = BookingDetailSerializer.Meta.fields + [
            'owner_name', 'owner_email', 'owner_phone',
        ]


# ==========================================================================
# Input Serializers
# ==========================================================================

def validate_not_past(value):
    if value < timezone.localdate():
        raise serializers.ValidationError("Service date cannot be in the past.")
    return value


class BookingCreateSerializer(serializers.Serializer):
    """Admission request: ``{serviceid, slot, servedate, payment_method, petIds}``."""

    serviceid = serializers.UUIDField()
    slot = serializers.CharField(max_length=20, trim_whitespace=True)
    servedate = serializers.DateField(validators=[validate_not_past])
    payment_method = serializers.CharField(max_length=50)
    petIds = serializers.ListField(
        child=serializers.UUIDField(),
        allow_empty=False
    )

    def validate_petIds(self, value):
        # Duplicates would violate the booking/pet link uniqueness
        return list(dict.fromkeys(value))


class BookingUpdateSerializer(serializers.Serializer):
    """Owner update; status may only be ``cancelled``."""

    servedate = serializers.DateField(required=False, validators=[validate_not_past])
    payment_method = serializers.CharField(max_length=50, required=False)
    status = serializers.ChoiceField(
        choices=Booking.Status.choices,
        required=False
    )

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("No fields to update.")
        return attrs
