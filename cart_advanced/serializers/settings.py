# cart_advanced/serializers/settings.py

from rest_framework import serializers

from cart_advanced.models import CartAdvancedSettings


class CartAdvancedSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = CartAdvancedSettings
        fields = ["display_non_current_carts", "updated_at"]
        read_only_fields = ["updated_at"]
