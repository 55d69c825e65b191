# cart_advanced/services/cart_page.py

"""
CART PAGES

Builds the payloads of:
- the cart page: every non-empty cart of the visitor, split into current and
  non-current carts
- the single cart page

Each cart entry names the view that renders it. The view comes from the
cart's order type (cart_form_view for current carts,
non_current_cart_form_view for non-current ones) and falls back to
settings.CART_ADVANCED["DEFAULT_CART_FORM_VIEW"].

Every payload carries cache metadata: it varies per user and session and
depends on each displayed cart.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from django.conf import settings

from cart_advanced.models import CartAdvancedSettings
from cart_advanced.serializers import CartSerializer
from orders.models import Order, OrderType

from .cart_resolver import CurrentCartResolver

PAGE_CACHE_CONTEXTS = ("session", "user")
CACHE_PERMANENT = -1

CURRENT_CART_CLASS = "cart--current-form"
NON_CURRENT_CART_CLASS = "cart--non-current-form"


@dataclass
class CacheableMetadata:
    contexts: set = field(default_factory=set)
    tags: set = field(default_factory=set)
    max_age: int = CACHE_PERMANENT

    def add_cache_contexts(self, contexts) -> None:
        self.contexts.update(contexts)

    def add_cacheable_dependency(self, cart: Order) -> None:
        self.tags.add(cart.cache_tag)

    def as_dict(self) -> dict:
        return {
            "contexts": sorted(self.contexts),
            "tags": sorted(self.tags),
            "max_age": self.max_age,
        }


def default_cart_form_view() -> str:
    return settings.CART_ADVANCED["DEFAULT_CART_FORM_VIEW"]


def display_non_current_carts() -> bool:
    return CartAdvancedSettings.load().display_non_current_carts


def get_cart_views(carts, *, non_current: bool = False) -> dict:
    """
    View name per cart id, picked from each cart's order type.
    """
    view_field = "non_current_cart_form_view" if non_current else "cart_form_view"
    order_types = OrderType.objects.in_bulk({cart.order_type_id for cart in carts})
    default_view = default_cart_form_view()

    cart_views = {}
    for cart in carts:
        order_type = order_types.get(cart.order_type_id)
        view_name = getattr(order_type, view_field, "") if order_type else ""
        cart_views[cart.pk] = view_name or default_view
    return cart_views


def split_carts(carts, *, resolver: CurrentCartResolver, account=None):
    """
    Returns (current_carts, non_current_carts), each keeping the input order.
    """
    current, non_current = [], []
    for cart in carts:
        if resolver.is_current(cart, account):
            current.append(cart)
        else:
            non_current.append(cart)
    return current, non_current


def build_cart(cart: Order, view_name: str, metadata: CacheableMetadata, classes=()) -> dict:
    metadata.add_cacheable_dependency(cart)
    return {
        "id": cart.pk,
        "view": view_name,
        "arguments": [cart.pk],
        "classes": ["cart", "cart-form", *classes],
        "cart": CartSerializer(cart).data,
    }


def build_carts(carts, metadata: CacheableMetadata, *, non_current: bool = False) -> list:
    cart_views = get_cart_views(carts, non_current=non_current)
    css_class = NON_CURRENT_CART_CLASS if non_current else CURRENT_CART_CLASS
    return [build_cart(cart, cart_views[cart.pk], metadata, [css_class]) for cart in carts]


def build_cart_page(*, resolver: CurrentCartResolver, account=None) -> dict:
    metadata = CacheableMetadata()
    metadata.add_cache_contexts(PAGE_CACHE_CONTEXTS)

    carts = [cart for cart in resolver.get_carts(account) if cart.has_items()]

    if not carts:
        return {
            "empty": True,
            "current_carts": [],
            "non_current_carts": [],
            "cache": metadata.as_dict(),
        }

    current, non_current = split_carts(carts, resolver=resolver, account=account)

    page = {
        "empty": False,
        "current_carts": build_carts(current, metadata),
        "non_current_carts": [],
    }

    if non_current and display_non_current_carts():
        page["non_current_carts"] = build_carts(non_current, metadata, non_current=True)

    page["cache"] = metadata.as_dict()
    return page


def build_single_cart_page(cart: Order) -> dict:
    metadata = CacheableMetadata()
    metadata.add_cache_contexts(PAGE_CACHE_CONTEXTS)

    view_name = get_cart_views([cart])[cart.pk]
    return {
        "cart": build_cart(cart, view_name, metadata),
        "cache": metadata.as_dict(),
    }
