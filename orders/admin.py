from django.contrib import admin

from .models import Order, OrderItem, OrderType

# =====================================================
# ORDER TYPE ADMIN
# =====================================================


@admin.register(OrderType)
class OrderTypeAdmin(admin.ModelAdmin):
    list_display = ("id", "label", "cart_form_view", "non_current_cart_form_view")
    search_fields = ("id", "label")


# =====================================================
# ORDER ITEM INLINE
# =====================================================


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("line_total", "created_at")


# =====================================================
# ORDER ADMIN
# =====================================================


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "order_type",
        "store",
        "customer",
        "state",
        "cart",
        "locked",
        "non_current_cart",
        "created_at",
    )
    list_filter = ("state", "cart", "locked", "non_current_cart", "order_type", "store")
    search_fields = ("customer__email", "customer__username")
    readonly_fields = ("id", "created_at", "updated_at")

    inlines = [OrderItemInline]
