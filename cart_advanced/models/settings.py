# cart_advanced/models/settings.py

"""
ADVANCED CART SETTINGS (SINGLETON)

One persisted row (pk=1). Until it is saved for the first time, values fall
back to settings.CART_ADVANCED.
"""

from django.conf import settings
from django.db import models


class CartAdvancedSettings(models.Model):
    SINGLETON_PK = 1

    display_non_current_carts = models.BooleanField(
        default=True,
        help_text="Show non current carts on the cart page.",
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "advanced cart settings"
        verbose_name_plural = "advanced cart settings"

    @classmethod
    def load(cls) -> "CartAdvancedSettings":
        obj = cls.objects.filter(pk=cls.SINGLETON_PK).first()
        if obj is None:
            obj = cls(
                pk=cls.SINGLETON_PK,
                display_non_current_carts=settings.CART_ADVANCED["DISPLAY_NON_CURRENT_CARTS"],
            )
        return obj

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        return super().save(*args, **kwargs)

    def __str__(self):
        return "Advanced cart settings"
