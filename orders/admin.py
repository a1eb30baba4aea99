from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("item_id", "price_id", "title", "size", "quantity", "unit_price")
    readonly_fields = fields
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "number", "status", "payment_status", "user", "guest_id", "phone", "total_amount", "created_at")
    list_filter = ("status", "payment_status", "created_at")
    search_fields = ("number", "email", "phone", "guest_id", "name")
    date_hierarchy = "created_at"
    inlines = [OrderItemInline]
    readonly_fields = (
        "items_price",
        "discount_coupon",
        "discount_amount",
        "tax_percent",
        "tax_amount",
        "delivery_charge",
        "total_amount",
        "created_at",
        "updated_at",
    )


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "title", "size", "quantity", "unit_price")
    list_filter = ("order",)
    search_fields = ("title",)
