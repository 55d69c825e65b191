# store/models/store.py

import uuid

from django.db import models
from django.db.models import Q


class Store(models.Model):
    """
    Represents a selling store / channel.

    Guarantees:
    - code is optional, but if provided it must be unique
    - at most one store is flagged as the default (the "current store"
      used when a cart request does not name one)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)

    code = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        help_text="Unique store code (optional). If set, must be unique.",
        db_index=True,
    )

    is_active = models.BooleanField(default=True)
    is_default = models.BooleanField(
        default=False,
        help_text="Store used when a request does not specify one.",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["code"],
                condition=Q(code__isnull=False) & ~Q(code=""),
                name="uniq_store_code_when_present",
            ),
            models.UniqueConstraint(
                fields=["is_default"],
                condition=Q(is_default=True),
                name="one_default_store",
            ),
        ]

    @classmethod
    def get_default(cls):
        """
        The current store fallback: the flagged default, else the first active store.
        """
        store = cls.objects.filter(is_active=True, is_default=True).first()
        if store is None:
            store = cls.objects.filter(is_active=True).first()
        return store

    def __str__(self):
        c = (self.code or "").strip()
        if c:
            return f"{self.name} ({c})"
        return self.name
