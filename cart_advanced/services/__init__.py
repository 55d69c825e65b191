# cart_advanced/services/__init__.py

from .cart_resolver import CurrentCartResolver, get_cart_resolver
from .exceptions import (
    CartAdvancedError,
    DuplicateCurrentCartError,
    StoreNotResolvedError,
)

__all__ = [
    "CurrentCartResolver",
    "get_cart_resolver",
    "CartAdvancedError",
    "DuplicateCurrentCartError",
    "StoreNotResolvedError",
]
