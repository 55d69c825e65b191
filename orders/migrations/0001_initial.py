"""
MIGRATION: CREATE OrderType, Order, OrderItem
"""

from __future__ import annotations

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("store", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="OrderType",
            fields=[
                ("id", models.SlugField(max_length=64, primary_key=True, serialize=False)),
                ("label", models.CharField(max_length=255)),
                (
                    "cart_form_view",
                    models.CharField(
                        max_length=128,
                        blank=True,
                        default="",
                        help_text="View rendering current carts of this type.",
                    ),
                ),
                (
                    "non_current_cart_form_view",
                    models.CharField(
                        max_length=128,
                        blank=True,
                        default="",
                        help_text="View rendering non-current (archived) carts of this type.",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "state",
                    models.CharField(
                        max_length=32,
                        choices=[
                            ("draft", "Draft"),
                            ("placed", "Placed"),
                            ("completed", "Completed"),
                            ("canceled", "Canceled"),
                        ],
                        default="draft",
                    ),
                ),
                ("cart", models.BooleanField(default=False)),
                ("locked", models.BooleanField(default=False)),
                (
                    "non_current_cart",
                    models.BooleanField(
                        default=False,
                        help_text="Archived cart: kept, but never the current cart.",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "customer",
                    models.ForeignKey(
                        to=settings.AUTH_USER_MODEL,
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="orders",
                        help_text="Owner. Empty for guest (anonymous) carts.",
                    ),
                ),
                (
                    "order_type",
                    models.ForeignKey(
                        to="orders.ordertype",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                    ),
                ),
                (
                    "store",
                    models.ForeignKey(
                        to="store.store",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                    ),
                ),
            ],
            options={
                "ordering": ["-id"],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("title", models.CharField(max_length=255)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("unit_price", models.DecimalField(max_digits=10, decimal_places=2)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        to="orders.order",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.AddIndex(
            model_name="order",
            index=models.Index(
                fields=["customer", "state", "cart", "locked"],
                name="order_cart_lookup_idx",
            ),
        ),
        migrations.AddIndex(
            model_name="order",
            index=models.Index(
                fields=["store", "order_type"],
                name="order_store_type_idx",
            ),
        ),
    ]
