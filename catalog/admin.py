"""Admin registration for catalog models."""

from django.contrib import admin

from .models import Category, Item, ItemPrice


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "is_active", "sort_order")
    search_fields = ("name",)
    list_filter = ("is_active",)


class ItemPriceInline(admin.TabularInline):
    model = ItemPrice
    extra = 0
    fields = ("size", "price")


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "status")
    search_fields = ("name",)
    list_filter = ("status", "category")
    inlines = [ItemPriceInline]


@admin.register(ItemPrice)
class ItemPriceAdmin(admin.ModelAdmin):
    list_display = ("id", "item", "size", "price")
    search_fields = ("item__name", "size")
    raw_id_fields = ("item",)
