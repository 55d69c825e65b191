# cart_advanced/services/cart_store.py

"""
CART STORE

Purpose:
- The only place the resolver touches persistence.
- Creates, saves, loads and queries cart orders.

Rules:
- create() returns an UNSAVED draft; callers decide when to save.
- query() only accepts the filters cart resolution needs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from orders.models import Order


class CartStore(ABC):
    @abstractmethod
    def create(self, *, order_type: str, store_id, customer_id, is_cart: bool = True) -> Order:
        ...

    @abstractmethod
    def save(self, cart: Order) -> Order:
        ...

    @abstractmethod
    def load(self, cart_id) -> Optional[Order]:
        ...

    @abstractmethod
    def load_multiple(self, cart_ids: Iterable) -> list[Order]:
        ...

    @abstractmethod
    def query(self, filters: dict, order_by: str = "-id") -> list[Order]:
        ...


class OrderCartStore(CartStore):
    """
    CartStore over the orders.Order model.
    """

    QUERY_FILTERS = frozenset(
        {
            "state",
            "cart",
            "locked",
            "customer",
            "non_current_cart",
            "store",
            "order_type",
        }
    )

    def create(self, *, order_type: str, store_id, customer_id, is_cart: bool = True) -> Order:
        return Order(
            order_type_id=order_type,
            store_id=store_id,
            customer_id=customer_id,
            cart=is_cart,
            state=Order.STATE_DRAFT,
        )

    def save(self, cart: Order) -> Order:
        cart.save()
        return cart

    def load(self, cart_id) -> Optional[Order]:
        if cart_id is None:
            return None
        return Order.objects.select_related("order_type", "store").filter(pk=cart_id).first()

    def load_multiple(self, cart_ids: Iterable) -> list[Order]:
        """
        Loads the given ids, keeping their order. Unknown ids are left out.
        """
        ids = [int(cart_id) for cart_id in cart_ids]
        if not ids:
            return []

        by_id = Order.objects.select_related("order_type", "store").in_bulk(ids)
        return [by_id[cart_id] for cart_id in ids if cart_id in by_id]

    def query(self, filters: dict, order_by: str = "-id") -> list[Order]:
        unknown = set(filters) - self.QUERY_FILTERS
        if unknown:
            raise ValueError(f"Unsupported cart filters: {', '.join(sorted(unknown))}")

        return list(Order.objects.filter(**filters).order_by(order_by))
