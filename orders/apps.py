# orders/apps.py

"""
ORDERS APP CONFIG

Host order subsystem:
- Order types (with per-type cart view selection)
- Orders; a cart is a draft order flagged as cart
"""

from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"
    verbose_name = "Orders"
