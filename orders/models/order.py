# orders/models/order.py

"""
ORDER MODEL

Purpose:
- An order in any lifecycle state. A shopping cart is an order with
  cart=True that is still in the draft state.

Rules:
- Guest carts have no customer (customer is NULL).
- locked=True while the customer is mid-checkout (e.g. off-site payment).
- non_current_cart=True marks a parked / archived draft cart. It stays a cart,
  it just never counts as the customer's current cart.
- No uniqueness constraint per (customer, store, order_type): several archived
  carts may coexist with the current one.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import DecimalField, ExpressionWrapper, F, Sum

from store.models import Store

from .order_type import OrderType


class Order(models.Model):
    STATE_DRAFT = "draft"
    STATE_PLACED = "placed"
    STATE_COMPLETED = "completed"
    STATE_CANCELED = "canceled"

    STATE_CHOICES = [
        (STATE_DRAFT, "Draft"),
        (STATE_PLACED, "Placed"),
        (STATE_COMPLETED, "Completed"),
        (STATE_CANCELED, "Canceled"),
    ]

    order_type = models.ForeignKey(
        OrderType,
        on_delete=models.PROTECT,
        related_name="orders",
    )

    store = models.ForeignKey(
        Store,
        on_delete=models.PROTECT,
        related_name="orders",
    )

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="orders",
        help_text="Owner. Empty for guest (anonymous) carts.",
    )

    state = models.CharField(
        max_length=32, choices=STATE_CHOICES, default=STATE_DRAFT
    )

    cart = models.BooleanField(default=False)
    locked = models.BooleanField(default=False)
    non_current_cart = models.BooleanField(
        default=False,
        help_text="Archived cart: kept, but never the current cart.",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-id"]
        indexes = [
            models.Index(
                fields=["customer", "state", "cart", "locked"],
                name="order_cart_lookup_idx",
            ),
            models.Index(fields=["store", "order_type"], name="order_store_type_idx"),
        ]

    @property
    def is_cart(self) -> bool:
        return bool(self.cart) and self.state == self.STATE_DRAFT

    def has_items(self) -> bool:
        return self.items.exists()

    @property
    def item_count(self) -> int:
        total = self.items.aggregate(total=Sum("quantity")).get("total")
        return int(total or 0)

    @property
    def total_amount(self) -> Decimal:
        total = (
            self.items.annotate(
                subtotal=ExpressionWrapper(
                    F("quantity") * F("unit_price"),
                    output_field=DecimalField(max_digits=12, decimal_places=2),
                )
            )
            .aggregate(total=Sum("subtotal"))
            .get("total")
        )
        return total or Decimal("0.00")

    @property
    def cache_tag(self) -> str:
        return f"order:{self.pk}"

    def lock(self):
        self.locked = True
        self.save(update_fields=["locked", "updated_at"])

    def unlock(self):
        self.locked = False
        self.save(update_fields=["locked", "updated_at"])

    def __str__(self):
        owner = self.customer or "guest"
        return f"Order {self.pk} | {self.order_type_id} | {owner} | {self.state}"
