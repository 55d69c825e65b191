# cart_advanced/services/cart_cache.py

"""
CART DATA CACHE

Per-resolver memory of which carts an account owns. Lives exactly as long as
the resolver (one request) and is never shared.

Shape of both indexes:
    {account_key: {cart_id: CartData(order_type, store_id)}}

account_key is the user pk, or None for the guest of the current session.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class CartData:
    order_type: str
    store_id: Any


class CartDataCache:
    def __init__(self):
        # all eligible carts, current and non-current
        self.all_carts: dict = {}
        # current carts only
        self.current_carts: dict = {}

    def get_all(self, account_key) -> Optional[dict]:
        return self.all_carts.get(account_key)

    def set_all(self, account_key, data: dict) -> dict:
        self.all_carts[account_key] = data
        return data

    def get_current(self, account_key) -> Optional[dict]:
        return self.current_carts.get(account_key)

    def set_current(self, account_key, data: dict) -> dict:
        self.current_carts[account_key] = data
        return data

    def add_cart(self, account_key, cart_id, data: CartData) -> None:
        """
        Registers a new current cart in whichever indexes are already loaded.
        Indexes not loaded yet will pick it up from storage.
        """
        for index in (self.all_carts, self.current_carts):
            if account_key in index:
                index[account_key][cart_id] = data

    def invalidate(self) -> None:
        self.all_carts = {}
        self.current_carts = {}
