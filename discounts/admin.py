from django.contrib import admin

from .models import Discount


@admin.register(Discount)
class DiscountAdmin(admin.ModelAdmin):
    list_display = ("code", "status", "amount_off", "updated_at")
    list_filter = ("status",)
    search_fields = ("code",)
