# cart_advanced/services/cart_resolver.py

"""
CURRENT CART RESOLVER (APPLICATION SERVICE)

Purpose:
- Answer "which cart is customer X's current cart for store S and order type T?"
- Create new current carts without colliding with an existing current one.

Hard rules:
- A cart is eligible only if it is a draft, flagged as cart, and NOT locked.
- A current cart is an eligible cart that is NOT flagged non_current_cart.
- At most one current cart per (account, store, order type) may be created
  here; any number of non-current carts may coexist with it.
- When storage holds several current carts for the same pair anyway
  (concurrent requests, manual edits), the HIGHEST cart id wins.

Guests:
- Carts are found through the session cart id list, not a query.
- Locked carts are skipped but stay in the session (the guest is probably
  off-site paying).
- Carts that are no longer guest-owned draft carts are dropped from the
  session so they are not loaded again.

Caching:
- Index data lives in a CartDataCache owned by this resolver (one request).
- Anything that flips the non_current_cart / locked flags outside this
  resolver must call clear_caches() afterwards.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from django.contrib.auth.models import AnonymousUser

from orders.models import Order
from store.models import Store

from .cart_cache import CartData, CartDataCache
from .cart_session import AnonymousCartSession, SessionCartSession
from .cart_store import CartStore, OrderCartStore
from .exceptions import DuplicateCurrentCartError, StoreNotResolvedError

logger = logging.getLogger(__name__)


def _account_key(account):
    return account.pk if account.is_authenticated else None


def _order_type_id(order_type) -> str:
    return getattr(order_type, "pk", order_type)


class CurrentCartResolver:
    def __init__(
        self,
        *,
        cart_store: CartStore,
        cart_session: AnonymousCartSession,
        current_user=None,
        current_store=None,
        cache: Optional[CartDataCache] = None,
    ):
        self.cart_store = cart_store
        self.cart_session = cart_session
        self.current_user = current_user
        self.current_store = current_store
        self.cache = cache or CartDataCache()

    # -------------------------------------------------
    # Current carts
    # -------------------------------------------------

    def get_current_cart_id(self, order_type, store=None, account=None) -> Optional[int]:
        account = self._resolve_account(account)
        cart_data = self._load_current_cart_data(account)
        if not cart_data:
            return None

        store_id = self._resolve_store_id(store)
        order_type_id = _order_type_id(order_type)

        matches = [
            cart_id
            for cart_id, data in cart_data.items()
            if data.order_type == order_type_id and data.store_id == store_id
        ]
        return max(matches) if matches else None

    def get_current_cart(self, order_type, store=None, account=None) -> Optional[Order]:
        cart_id = self.get_current_cart_id(order_type, store, account)
        if cart_id is None:
            return None
        return self.cart_store.load(cart_id)

    def get_current_carts(self, account=None) -> list[Order]:
        account = self._resolve_account(account)
        cart_ids = sorted(self._load_current_cart_data(account), reverse=True)
        return self.cart_store.load_multiple(cart_ids)

    def is_current(self, cart: Order, account=None) -> bool:
        return self.get_current_cart_id(cart.order_type_id, cart.store_id, account) == cart.pk

    # -------------------------------------------------
    # All carts (current + non-current)
    # -------------------------------------------------

    def get_cart_ids(self, account=None) -> list[int]:
        account = self._resolve_account(account)
        return sorted(self._load_cart_data(account), reverse=True)

    def get_carts(self, account=None) -> list[Order]:
        return self.cart_store.load_multiple(self.get_cart_ids(account))

    # -------------------------------------------------
    # Mutations
    # -------------------------------------------------

    def create_cart(self, order_type, store=None, account=None) -> Order:
        """
        Creates a new current cart.

        Raises DuplicateCurrentCartError if a current cart already exists for the
        order type, store and account. Non-current carts do not block creation.
        """
        account = self._resolve_account(account)
        account_key = _account_key(account)
        store_id = self._resolve_store_id(store)
        order_type_id = _order_type_id(order_type)

        existing_id = self.get_current_cart_id(order_type_id, store_id, account)
        if existing_id:
            raise DuplicateCurrentCartError(
                order_type=order_type_id,
                store_id=store_id,
                account_id=account_key,
                existing_cart_id=existing_id,
            )

        cart = self.cart_store.create(
            order_type=order_type_id,
            store_id=store_id,
            customer_id=account_key,
            is_cart=True,
        )
        self.cart_store.save(cart)

        # Guests find their carts on the next request through the session.
        if not account.is_authenticated:
            self.cart_session.add_cart_id(cart.pk)

        self.cache.add_cart(account_key, cart.pk, CartData(order_type_id, store_id))

        logger.info(
            "Created current cart",
            extra={
                "cart_id": cart.pk,
                "order_type": order_type_id,
                "store_id": str(store_id),
                "customer_id": account_key,
            },
        )
        return cart

    def archive_cart(self, cart: Order) -> Order:
        """
        Parks the cart: it stays a draft cart but is no longer current.
        """
        if cart.non_current_cart:
            return cart

        cart.non_current_cart = True
        self.cart_store.save(cart)
        self.clear_caches()

        logger.info("Archived cart", extra={"cart_id": cart.pk})
        return cart

    def restore_cart(self, cart: Order, account=None) -> Order:
        """
        Makes a non-current cart current again.

        Raises DuplicateCurrentCartError if another current cart already holds
        the cart's order type and store.
        """
        if not cart.non_current_cart:
            return cart

        account = self._resolve_account(account)
        existing_id = self.get_current_cart_id(cart.order_type_id, cart.store_id, account)
        if existing_id and existing_id != cart.pk:
            raise DuplicateCurrentCartError(
                order_type=cart.order_type_id,
                store_id=cart.store_id,
                account_id=_account_key(account),
                existing_cart_id=existing_id,
            )

        cart.non_current_cart = False
        self.cart_store.save(cart)
        self.clear_caches()

        logger.info("Restored cart", extra={"cart_id": cart.pk})
        return cart

    def clear_caches(self) -> None:
        self.cache.invalidate()

    # -------------------------------------------------
    # Index loading
    # -------------------------------------------------

    def _load_cart_data(self, account) -> dict:
        account_key = _account_key(account)
        cart_data = self.cache.get_all(account_key)
        if cart_data is not None:
            return cart_data

        if account.is_authenticated:
            carts = self.cart_store.query(self._eligible_filters(account_key))
        else:
            carts = self._load_session_carts()

        return self.cache.set_all(account_key, self._index(carts))

    def _load_current_cart_data(self, account) -> dict:
        account_key = _account_key(account)
        cart_data = self.cache.get_current(account_key)
        if cart_data is not None:
            return cart_data

        if account.is_authenticated:
            filters = self._eligible_filters(account_key)
            filters["non_current_cart"] = False
            carts = self.cart_store.query(filters)
        else:
            carts = [c for c in self._load_session_carts() if not c.non_current_cart]

        return self.cache.set_current(account_key, self._index(carts))

    def _load_session_carts(self) -> list[Order]:
        cart_ids = self.cart_session.get_cart_ids()
        if not cart_ids:
            return []

        carts = self.cart_store.load_multiple(cart_ids)

        loaded_ids = {cart.pk for cart in carts}
        for cart_id in cart_ids:
            if cart_id not in loaded_ids:
                self.cart_session.delete_cart_id(cart_id)
                logger.info("Dropped unknown cart from session", extra={"cart_id": cart_id})

        eligible = []
        for cart in carts:
            if cart.locked:
                continue

            if cart.customer_id is not None or not cart.is_cart:
                self.cart_session.delete_cart_id(cart.pk)
                logger.info(
                    "Dropped ineligible cart from session",
                    extra={"cart_id": cart.pk, "state": cart.state},
                )
                continue

            eligible.append(cart)

        return eligible

    @staticmethod
    def _eligible_filters(customer_id) -> dict:
        return {
            "state": Order.STATE_DRAFT,
            "cart": True,
            "locked": False,
            "customer": customer_id,
        }

    @staticmethod
    def _index(carts) -> dict:
        return {cart.pk: CartData(cart.order_type_id, cart.store_id) for cart in carts}

    # -------------------------------------------------
    # Defaults
    # -------------------------------------------------

    def _resolve_account(self, account):
        account = account or self.current_user
        return account if account is not None else AnonymousUser()

    def _resolve_store_id(self, store):
        store = store or self.current_store
        if store is None:
            store = Store.get_default()
        if store is None:
            raise StoreNotResolvedError("No store given and no default store is configured.")

        if isinstance(store, Store):
            return store.pk
        if isinstance(store, uuid.UUID):
            return store
        return uuid.UUID(str(store))


def get_cart_resolver(request) -> CurrentCartResolver:
    """
    Request-scoped resolver: built once per request and reused by every caller
    handling that request.
    """
    http_request = getattr(request, "_request", request)
    resolver = getattr(http_request, "_cart_resolver", None)
    if resolver is None:
        resolver = CurrentCartResolver(
            cart_store=OrderCartStore(),
            cart_session=SessionCartSession(request.session),
            current_user=request.user,
        )
        http_request._cart_resolver = resolver
    return resolver
