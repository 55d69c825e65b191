"""
PATH: cart_advanced/urls.py

CART URLS

Purpose:
- Cart page (current + non-current carts) and single cart page
- Current cart lookup and creation
- Archive / restore a cart
- Advanced cart settings (admin)
"""

from django.urls import path

from cart_advanced.views.api import (
    ArchiveCartView,
    CartPageView,
    CartSettingsView,
    CreateCartView,
    CurrentCartView,
    RestoreCartView,
    SingleCartView,
)

app_name = "cart_advanced"

urlpatterns = [
    path("", CartPageView.as_view(), name="cart-page"),
    path("current/", CurrentCartView.as_view(), name="current-cart"),
    path("create/", CreateCartView.as_view(), name="create-cart"),
    path("settings/", CartSettingsView.as_view(), name="settings"),

    path("<int:cart_id>/", SingleCartView.as_view(), name="single-cart"),
    path("<int:cart_id>/archive/", ArchiveCartView.as_view(), name="archive-cart"),
    path("<int:cart_id>/restore/", RestoreCartView.as_view(), name="restore-cart"),
]
