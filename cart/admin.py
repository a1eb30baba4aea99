"""Admin registration for cart lines.

Carts have no row of their own, so support works on `CartLine` rows and can
filter them by owner type or clear the carts of selected lines.
"""

from common.owners import owner_of
from django.contrib import admin, messages

from .models import CartLine
from .services import clear_cart


class OwnerTypeFilter(admin.SimpleListFilter):
    title = "owner type"
    parameter_name = "owner_type"

    def lookups(self, request, model_admin):
        return (
            ("user", "User carts"),
            ("guest", "Guest carts"),
        )

    def queryset(self, request, queryset):
        value = self.value()
        if value == "user":
            return queryset.filter(user__isnull=False)
        if value == "guest":
            return queryset.filter(user__isnull=True)
        return queryset


@admin.register(CartLine)
class CartLineAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "guest_id", "item", "price", "unit_price", "discount_code", "created_at")
    list_filter = (OwnerTypeFilter,)
    search_fields = ("guest_id", "user__username", "user__email", "discount_code")
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("user", "item", "price")
    list_select_related = ("user",)

    @admin.action(description="Clear the carts owning the selected lines")
    def action_clear_carts(self, request, queryset):
        owners = {owner_of(line) for line in queryset}
        deleted = 0
        for owner in owners:
            deleted += clear_cart(owner=owner)
        messages.success(request, f"Cleared {len(owners)} cart(s), {deleted} line(s) removed.")

    actions = ["action_clear_carts"]
