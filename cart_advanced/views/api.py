# cart_advanced/views/api.py

"""
CART API VIEWS

Purpose:
- Cart page: the visitor's non-empty carts, current and non-current
- Single cart page (owner / draft / unlocked only)
- Current cart lookup and creation per order type and store
- Archive / restore carts
- Advanced cart settings (admin only)

Hard rules:
- Guests are identified by their session, so session authentication comes
  first on every cart view.
- One resolver per request (get_cart_resolver); every cart decision goes
  through it.
"""

from __future__ import annotations

from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils.cache import patch_vary_headers
from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.authentication import SessionAuthentication
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.authentication import JWTAuthentication

from cart_advanced.models import CartAdvancedSettings
from cart_advanced.serializers import CartAdvancedSettingsSerializer, CartSerializer
from cart_advanced.services import DuplicateCurrentCartError, get_cart_resolver
from cart_advanced.services.cart_page import build_cart_page, build_single_cart_page
from orders.models import Order, OrderType
from store.models import Store

from .permissions import CanViewCart


# =====================================================
# SWAGGER INPUT SERIALIZERS
# =====================================================

class CurrentCartQuerySerializer(serializers.Serializer):
    order_type = serializers.CharField(max_length=64)
    store_id = serializers.UUIDField(required=False, allow_null=True)


class CreateCartInputSerializer(serializers.Serializer):
    order_type = serializers.CharField(max_length=64)
    store_id = serializers.UUIDField(required=False, allow_null=True)


# =====================================================
# API ERROR NORMALIZATION
# =====================================================

def error_response(*, code: str, message: str, http_status: int, **extra):
    return Response(
        {"error": {"code": code, "message": message, **extra}},
        status=http_status,
    )


def duplicate_cart_response(exc: DuplicateCurrentCartError):
    return error_response(
        code="DUPLICATE_CURRENT_CART",
        message=str(exc),
        http_status=status.HTTP_409_CONFLICT,
        cart_id=exc.existing_cart_id,
    )


# =====================================================
# HELPERS
# =====================================================

def _resolve_store(*, store_id) -> Store:
    """
    The requested store, else the default store.
    """
    if store_id:
        return get_object_or_404(Store, id=store_id, is_active=True)

    store = Store.get_default()
    if store is None:
        raise serializers.ValidationError(
            {"store_id": "store_id is required: no default store is configured."}
        )
    return store


def _resolve_order_type(*, order_type_id) -> OrderType:
    return get_object_or_404(OrderType, pk=order_type_id)


def _page_response(payload: dict) -> Response:
    # Pages differ per user and per session
    response = Response(payload, status=status.HTTP_200_OK)
    patch_vary_headers(response, ("Cookie",))
    return response


class CartAPIView(APIView):
    authentication_classes = [SessionAuthentication, JWTAuthentication]
    permission_classes = [AllowAny]

    def get_cart(self, request, cart_id) -> Order:
        cart = get_object_or_404(
            Order.objects.select_related("order_type", "store"),
            pk=cart_id,
        )
        self.check_object_permissions(request, cart)
        return cart


# =====================================================
# CART PAGES
# =====================================================

class CartPageView(CartAPIView):
    """
    All non-empty carts of the visitor, split into current and non-current.
    """

    @extend_schema(
        responses={200: dict},
        description=(
            "List the visitor's carts. Current carts come first; non-current "
            "carts are listed only when the display_non_current_carts setting is on."
        ),
    )
    def get(self, request):
        resolver = get_cart_resolver(request)
        return _page_response(build_cart_page(resolver=resolver, account=request.user))


class SingleCartView(CartAPIView):
    permission_classes = [AllowAny, CanViewCart]

    @extend_schema(
        responses={200: dict},
        description="Show one cart (owner only, draft and unlocked carts only).",
    )
    def get(self, request, cart_id):
        cart = self.get_cart(request, cart_id)
        return _page_response(build_single_cart_page(cart))


# =====================================================
# CURRENT CARTS
# =====================================================

class CurrentCartView(CartAPIView):
    @extend_schema(
        parameters=[CurrentCartQuerySerializer],
        responses={200: dict},
        description="Get the current cart for an order type and store (null if none).",
    )
    def get(self, request):
        serializer = CurrentCartQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        store = _resolve_store(store_id=serializer.validated_data.get("store_id"))
        order_type = _resolve_order_type(order_type_id=serializer.validated_data["order_type"])

        resolver = get_cart_resolver(request)
        cart = resolver.get_current_cart(order_type, store, request.user)

        return Response(
            {"cart": CartSerializer(cart).data if cart else None},
            status=status.HTTP_200_OK,
        )


class CreateCartView(CartAPIView):
    """
    Create a new current cart. Archived carts for the same order type and
    store do not block creation; an existing current cart does (409).
    """

    @extend_schema(
        request=CreateCartInputSerializer,
        responses={201: CartSerializer, 409: dict},
        description="Create a current cart for an order type and store.",
    )
    @transaction.atomic
    def post(self, request):
        serializer = CreateCartInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        store = _resolve_store(store_id=serializer.validated_data.get("store_id"))
        order_type = _resolve_order_type(order_type_id=serializer.validated_data["order_type"])

        resolver = get_cart_resolver(request)
        try:
            cart = resolver.create_cart(order_type, store, request.user)
        except DuplicateCurrentCartError as exc:
            return duplicate_cart_response(exc)

        return Response(CartSerializer(cart).data, status=status.HTTP_201_CREATED)


class ArchiveCartView(CartAPIView):
    permission_classes = [AllowAny, CanViewCart]

    @extend_schema(
        request=None,
        responses={200: CartSerializer},
        description="Mark a cart as non current (archived).",
    )
    @transaction.atomic
    def post(self, request, cart_id):
        cart = self.get_cart(request, cart_id)
        cart = get_cart_resolver(request).archive_cart(cart)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


class RestoreCartView(CartAPIView):
    permission_classes = [AllowAny, CanViewCart]

    @extend_schema(
        request=None,
        responses={200: CartSerializer, 409: dict},
        description="Make an archived cart current again (409 if another current cart exists).",
    )
    @transaction.atomic
    def post(self, request, cart_id):
        cart = self.get_cart(request, cart_id)
        try:
            cart = get_cart_resolver(request).restore_cart(cart, request.user)
        except DuplicateCurrentCartError as exc:
            return duplicate_cart_response(exc)
        return Response(CartSerializer(cart).data, status=status.HTTP_200_OK)


# =====================================================
# SETTINGS
# =====================================================

class CartSettingsView(CartAPIView):
    permission_classes = [IsAdminUser]
    serializer_class = CartAdvancedSettingsSerializer

    @extend_schema(responses={200: CartAdvancedSettingsSerializer})
    def get(self, request):
        return Response(
            CartAdvancedSettingsSerializer(CartAdvancedSettings.load()).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        request=CartAdvancedSettingsSerializer,
        responses={200: CartAdvancedSettingsSerializer},
    )
    def put(self, request):
        return self._update(request, partial=False)

    @extend_schema(
        request=CartAdvancedSettingsSerializer,
        responses={200: CartAdvancedSettingsSerializer},
    )
    def patch(self, request):
        return self._update(request, partial=True)

    def _update(self, request, *, partial: bool):
        serializer = CartAdvancedSettingsSerializer(
            CartAdvancedSettings.load(),
            data=request.data,
            partial=partial,
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_200_OK)
