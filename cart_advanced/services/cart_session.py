# cart_advanced/services/cart_session.py

"""
ANONYMOUS CART SESSION

Guests have no customer id, so the only proof a guest owns a cart is the
list of cart ids kept in their Django session.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

SESSION_KEY = "cart_advanced.cart_ids"


class AnonymousCartSession(ABC):
    @abstractmethod
    def get_cart_ids(self) -> list[int]:
        ...

    @abstractmethod
    def add_cart_id(self, cart_id) -> None:
        ...

    @abstractmethod
    def delete_cart_id(self, cart_id) -> None:
        ...

    @abstractmethod
    def has_cart_id(self, cart_id) -> bool:
        ...


class SessionCartSession(AnonymousCartSession):
    """
    Cart ids stored as a list of ints under SESSION_KEY.
    """

    def __init__(self, session):
        self.session = session

    def get_cart_ids(self) -> list[int]:
        stored = self.session.get(SESSION_KEY, [])
        if not isinstance(stored, list):
            stored = [stored]

        cart_ids = []
        for value in stored:
            try:
                cart_ids.append(int(value))
            except (TypeError, ValueError):
                continue

        # Unparseable entries are dropped so they are not read again.
        if len(cart_ids) != len(stored):
            self._write(cart_ids)
        return cart_ids

    def add_cart_id(self, cart_id) -> None:
        cart_ids = self.get_cart_ids()
        if int(cart_id) in cart_ids:
            return
        cart_ids.append(int(cart_id))
        self._write(cart_ids)

    def delete_cart_id(self, cart_id) -> None:
        cart_ids = self.get_cart_ids()
        remaining = [i for i in cart_ids if i != int(cart_id)]
        if len(remaining) == len(cart_ids):
            return
        self._write(remaining)

    def has_cart_id(self, cart_id) -> bool:
        return int(cart_id) in self.get_cart_ids()

    def _write(self, cart_ids: list[int]) -> None:
        if cart_ids:
            self.session[SESSION_KEY] = cart_ids
        else:
            self.session.pop(SESSION_KEY, None)
        self.session.modified = True
