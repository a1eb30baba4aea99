"""Cart URL routes (v1)."""

from django.urls import path

from .views import CartClearView, CartDeleteView, CartDiscountView, CartItemView, CartView

app_name = "cart"

urlpatterns = [
    path("", CartView.as_view(), name="cart-detail"),
    path("items/", CartItemView.as_view(), name="cart-item"),
    path("discount/", CartDiscountView.as_view(), name="cart-discount"),
    path("clear/", CartClearView.as_view(), name="cart-clear"),
    path("<int:line_id>/", CartDeleteView.as_view(), name="cart-delete"),
]
