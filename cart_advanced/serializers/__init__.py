from .cart import CartSerializer, OrderItemSerializer
from .settings import CartAdvancedSettingsSerializer

__all__ = [
    "CartSerializer",
    "OrderItemSerializer",
    "CartAdvancedSettingsSerializer",
]
