"""
PATH: cart_advanced/serializers/cart.py

CART SERIALIZER

Purpose:
- Return a cart order in a frontend-friendly shape.
- Totals are server-derived.
- Include store + order type context and the current / non-current flags.
"""

from rest_framework import serializers

from orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    line_total = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        read_only=True,
    )

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "title",
            "quantity",
            "unit_price",
            "line_total",
            "created_at",
        ]
        read_only_fields = fields


class CartSerializer(serializers.ModelSerializer):
    """
    Read-only serializer for cart orders.
    """

    order_type = serializers.CharField(source="order_type_id", read_only=True)
    store_id = serializers.UUIDField(read_only=True)
    store_name = serializers.CharField(source="store.name", read_only=True)
    customer_id = serializers.IntegerField(read_only=True, allow_null=True)

    items = OrderItemSerializer(many=True, read_only=True)

    item_count = serializers.IntegerField(read_only=True)
    total_amount = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_type",
            "store_id",
            "store_name",
            "customer_id",
            "state",
            "cart",
            "locked",
            "non_current_cart",
            "items",
            "item_count",
            "total_amount",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_total_amount(self, obj) -> str:
        # String avoids float serialization issues
        return f"{obj.total_amount:.2f}"
