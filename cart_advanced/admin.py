from django.contrib import admin

from .models import CartAdvancedSettings


@admin.register(CartAdvancedSettings)
class CartAdvancedSettingsAdmin(admin.ModelAdmin):
    list_display = ("__str__", "display_non_current_carts", "updated_at")
    readonly_fields = ("updated_at",)

    def has_add_permission(self, request):
        return not CartAdvancedSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
