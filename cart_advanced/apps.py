# cart_advanced/apps.py

"""
ADVANCED CART APP CONFIG

Extends the host order subsystem with current / non-current carts:
- at most one current cart per customer, store and order type
- any number of archived (non-current) carts alongside it
- cart pages listing both groups
"""

from django.apps import AppConfig


class CartAdvancedConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "cart_advanced"
    verbose_name = "Advanced Carts"
