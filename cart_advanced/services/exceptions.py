# cart_advanced/services/exceptions.py

"""
ADVANCED CART SERVICE ERRORS

Centralized domain errors for cart resolution.
"""


class CartAdvancedError(Exception):
    """Base exception for all advanced cart failures."""


class StoreNotResolvedError(CartAdvancedError):
    """Raised when no store was given and no default store exists."""


class DuplicateCurrentCartError(CartAdvancedError):
    """
    Raised when a current cart already exists for the order type, store and
    account. Archived carts for the same combination never trigger it.
    """

    def __init__(self, *, order_type, store_id, account_id, existing_cart_id=None):
        self.order_type = order_type
        self.store_id = store_id
        self.account_id = account_id
        self.existing_cart_id = existing_cart_id
        super().__init__(
            f'A current cart order for type "{order_type}", store "{store_id}" '
            f'and account "{account_id if account_id is not None else "anonymous"}" already exists'
        )
