from django.contrib import admin

from .models import Address, City


@admin.register(City)
class CityAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "street_address", "city", "state", "zip_code")
    list_filter = ("city",)
    search_fields = ("street_address", "zip_code", "user__email", "user__username")
    ordering = ("-updated_at", "id")
