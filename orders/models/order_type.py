# orders/models/order_type.py

from django.db import models


class OrderType(models.Model):
    """
    Order classification ("default", "wholesale", ...).

    The view fields pick which cart form renders carts of this type on the
    cart pages. Empty means the project default (CART_ADVANCED setting).
    """

    id = models.SlugField(max_length=64, primary_key=True)
    label = models.CharField(max_length=255)

    cart_form_view = models.CharField(
        max_length=128,
        blank=True,
        default="",
        help_text="View rendering current carts of this type.",
    )
    non_current_cart_form_view = models.CharField(
        max_length=128,
        blank=True,
        default="",
        help_text="View rendering non-current (archived) carts of this type.",
    )

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.label or self.id
