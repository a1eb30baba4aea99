"""Admin API routes for carts and orders (v1)."""

from cart.views import AdminCartListView
from django.urls import path

from .views import AdminOrderListView, AdminOrderStatusView

app_name = "admin_api"

urlpatterns = [
    path("carts/", AdminCartListView.as_view(), name="admin-cart-list"),
    path("orders/", AdminOrderListView.as_view(), name="admin-order-list"),
    path("orders/<int:order_id>/status/", AdminOrderStatusView.as_view(), name="admin-order-status"),
]
