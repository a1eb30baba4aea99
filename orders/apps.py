from django.apps import AppConfig


class OrdersConfig(AppConfig):
    """App configuration for placed orders and their notifications."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"
    verbose_name = "Orders"
