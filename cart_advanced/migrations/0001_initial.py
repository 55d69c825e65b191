"""
MIGRATION: CREATE CartAdvancedSettings
"""

from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CartAdvancedSettings",
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
                    "display_non_current_carts",
                    models.BooleanField(
                        default=True,
                        help_text="Show non current carts on the cart page.",
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "advanced cart settings",
                "verbose_name_plural": "advanced cart settings",
            },
        ),
    ]
