from django.contrib import admin
from .models import Booking, BookingPet, Pet, PetOwner, Service, Timeslot


class TimeslotInline(admin.TabularInline):
    model = Timeslot
    extra = 0
    fields = ['slot', 'is_active', 'retired_at']
    readonly_fields = ['retired_at']


class BookingPetInline(admin.TabularInline):
    model = BookingPet
    extra = 0


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'provider_id', 'price', 'status']
    list_filter = ['status']
    search_fields = ['name']
    inlines = [TimeslotInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['id', 'service', 'timeslot', 'servedate', 'owner', 'status']
    list_filter = ['status', 'servedate']
    inlines = [BookingPetInline]


@admin.register(PetOwner)
class PetOwnerAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'email']
    search_fields = ['name', 'email']


@admin.register(Pet)
class PetAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'breed', 'owner']
