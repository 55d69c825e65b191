# orders/models/__init__.py

"""
ORDERS MODELS PACKAGE EXPORTS
"""

from .order import Order
from .order_item import OrderItem
from .order_type import OrderType

__all__ = [
    "Order",
    "OrderItem",
    "OrderType",
]
