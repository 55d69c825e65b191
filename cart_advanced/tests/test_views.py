# cart_advanced/tests/test_views.py

"""
CART API TESTS

Covers:
- Cart page (current / non-current split, display setting, view selection)
- Single cart access rules
- Current cart lookup and creation (409 on duplicates)
- Archive / restore
- Settings endpoint (admin only)
"""

from __future__ import annotations

import uuid

from django.contrib.auth.models import AnonymousUser
from django.contrib.sessions.backends.db import SessionStore
from django.test import RequestFactory, TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from cart_advanced.models import CartAdvancedSettings
from cart_advanced.services import get_cart_resolver
from cart_advanced.services.cart_session import SessionCartSession
from cart_advanced.views.permissions import CanViewCart
from orders.models import Order
from store.models import Store

from .factories import add_item, make_cart, make_order_type, make_store, make_user


class CartAPIBaseTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()

        self.store = make_store("Main", is_default=True)
        self.store2 = make_store("Outlet")
        self.default_type = make_order_type("default")
        self.wholesale_type = make_order_type(
            "wholesale",
            cart_form_view="wholesale_cart_form",
            non_current_cart_form_view="wholesale_saved_cart_form",
        )

        self.user = make_user("customer")
        self.other = make_user("other")
        self.admin = make_user("admin", is_staff=True)

    def login(self, user):
        self.client.force_authenticate(user=user)


# --------------------------------------------------
# Cart page
# --------------------------------------------------


class CartPageTests(CartAPIBaseTestCase):
    def setUp(self):
        super().setUp()
        self.url = reverse("cart_advanced:cart-page")

    def test_empty_page(self):
        self.login(self.user)
        make_cart(store=self.store, customer=self.user)  # no items

        res = self.client.get(self.url)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res.data["empty"])
        self.assertEqual(res.data["current_carts"], [])
        self.assertEqual(res.data["non_current_carts"], [])
        self.assertEqual(res.data["cache"]["contexts"], ["session", "user"])
        self.assertEqual(res.data["cache"]["tags"], [])
        self.assertEqual(res.data["cache"]["max_age"], -1)

    def test_page_splits_current_and_non_current_carts(self):
        self.login(self.user)
        archived = make_cart(store=self.store, customer=self.user, non_current_cart=True)
        current = make_cart(store=self.store, customer=self.user)
        add_item(archived)
        add_item(current, quantity=2, unit_price="4.50")

        res = self.client.get(self.url)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertFalse(res.data["empty"])

        self.assertEqual([c["id"] for c in res.data["current_carts"]], [current.pk])
        self.assertEqual([c["id"] for c in res.data["non_current_carts"]], [archived.pk])

        entry = res.data["current_carts"][0]
        self.assertEqual(entry["view"], "commerce_cart_form")
        self.assertEqual(entry["arguments"], [current.pk])
        self.assertEqual(entry["classes"], ["cart", "cart-form", "cart--current-form"])
        self.assertEqual(entry["cart"]["total_amount"], "9.00")
        self.assertEqual(entry["cart"]["item_count"], 2)

        self.assertEqual(
            res.data["non_current_carts"][0]["classes"],
            ["cart", "cart-form", "cart--non-current-form"],
        )
        self.assertCountEqual(
            res.data["cache"]["tags"],
            [f"order:{current.pk}", f"order:{archived.pk}"],
        )
        self.assertIn("Cookie", res["Vary"])

    def test_older_current_carts_are_listed_as_non_current(self):
        self.login(self.user)
        older = make_cart(store=self.store, customer=self.user)
        newest = make_cart(store=self.store, customer=self.user)
        add_item(older)
        add_item(newest)

        res = self.client.get(self.url)

        self.assertEqual([c["id"] for c in res.data["current_carts"]], [newest.pk])
        self.assertEqual([c["id"] for c in res.data["non_current_carts"]], [older.pk])

    def test_non_current_carts_hidden_when_setting_is_off(self):
        CartAdvancedSettings(display_non_current_carts=False).save()
        self.login(self.user)
        archived = make_cart(store=self.store, customer=self.user, non_current_cart=True)
        current = make_cart(store=self.store, customer=self.user)
        add_item(archived)
        add_item(current)

        res = self.client.get(self.url)

        self.assertEqual([c["id"] for c in res.data["current_carts"]], [current.pk])
        self.assertEqual(res.data["non_current_carts"], [])
        self.assertEqual(res.data["cache"]["tags"], [f"order:{current.pk}"])

    def test_only_non_current_carts_with_setting_off(self):
        CartAdvancedSettings(display_non_current_carts=False).save()
        self.login(self.user)
        add_item(make_cart(store=self.store, customer=self.user, non_current_cart=True))

        res = self.client.get(self.url)

        self.assertFalse(res.data["empty"])
        self.assertEqual(res.data["current_carts"], [])
        self.assertEqual(res.data["non_current_carts"], [])

    @override_settings(
        CART_ADVANCED={
            "DISPLAY_NON_CURRENT_CARTS": False,
            "DEFAULT_CART_FORM_VIEW": "commerce_cart_form",
        }
    )
    def test_display_setting_falls_back_to_django_settings(self):
        self.login(self.user)
        add_item(make_cart(store=self.store, customer=self.user, non_current_cart=True))

        res = self.client.get(self.url)

        self.assertEqual(res.data["non_current_carts"], [])

    def test_order_type_views_are_used(self):
        self.login(self.user)
        archived = make_cart(
            store=self.store,
            order_type=self.wholesale_type,
            customer=self.user,
            non_current_cart=True,
        )
        current = make_cart(store=self.store, order_type=self.wholesale_type, customer=self.user)
        add_item(archived)
        add_item(current)

        res = self.client.get(self.url)

        self.assertEqual(res.data["current_carts"][0]["view"], "wholesale_cart_form")
        self.assertEqual(res.data["non_current_carts"][0]["view"], "wholesale_saved_cart_form")

    @override_settings(
        CART_ADVANCED={
            "DISPLAY_NON_CURRENT_CARTS": True,
            "DEFAULT_CART_FORM_VIEW": "custom_cart_form",
        }
    )
    def test_default_view_comes_from_settings(self):
        self.login(self.user)
        add_item(make_cart(store=self.store, customer=self.user))

        res = self.client.get(self.url)

        self.assertEqual(res.data["current_carts"][0]["view"], "custom_cart_form")

    def test_other_customers_carts_are_not_listed(self):
        self.login(self.user)
        add_item(make_cart(store=self.store, customer=self.other))

        res = self.client.get(self.url)

        self.assertTrue(res.data["empty"])

    def test_guest_page_lists_session_carts(self):
        res = self.client.post(
            reverse("cart_advanced:create-cart"),
            {"order_type": "default"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        cart = Order.objects.get(pk=res.data["id"])
        add_item(cart)

        res = self.client.get(self.url)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([c["id"] for c in res.data["current_carts"]], [cart.pk])

        stranger = APIClient()
        res = stranger.get(self.url)
        self.assertTrue(res.data["empty"])


# --------------------------------------------------
# Single cart
# --------------------------------------------------


class SingleCartTests(CartAPIBaseTestCase):
    def url(self, cart_id):
        return reverse("cart_advanced:single-cart", args=[cart_id])

    def test_owner_can_view_cart(self):
        self.login(self.user)
        cart = make_cart(store=self.store2, order_type=self.wholesale_type, customer=self.user)

        res = self.client.get(self.url(cart.pk))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["cart"]["id"], cart.pk)
        self.assertEqual(res.data["cart"]["view"], "wholesale_cart_form")
        self.assertEqual(res.data["cart"]["cart"]["store_name"], "Outlet")
        self.assertEqual(res.data["cache"]["tags"], [f"order:{cart.pk}"])

    def test_other_customer_is_denied(self):
        self.login(self.other)
        cart = make_cart(store=self.store, customer=self.user)

        res = self.client.get(self.url(cart.pk))

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_locked_cart_is_denied(self):
        self.login(self.user)
        cart = make_cart(store=self.store, customer=self.user, locked=True)

        res = self.client.get(self.url(cart.pk))

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_placed_order_is_denied(self):
        self.login(self.user)
        cart = make_cart(store=self.store, customer=self.user, state=Order.STATE_PLACED)

        res = self.client.get(self.url(cart.pk))

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_missing_cart_is_404(self):
        self.login(self.user)

        res = self.client.get(self.url(424242))

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_guest_sees_only_own_session_carts(self):
        res = self.client.post(
            reverse("cart_advanced:create-cart"),
            {"order_type": "default"},
            format="json",
        )
        cart_id = res.data["id"]

        res = self.client.get(self.url(cart_id))
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        stranger = APIClient()
        res = stranger.get(self.url(cart_id))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)


# --------------------------------------------------
# Current cart / create
# --------------------------------------------------


class CurrentCartTests(CartAPIBaseTestCase):
    def setUp(self):
        super().setUp()
        self.current_url = reverse("cart_advanced:current-cart")
        self.create_url = reverse("cart_advanced:create-cart")

    def test_current_cart_is_null_without_carts(self):
        self.login(self.user)

        res = self.client.get(self.current_url, {"order_type": "default"})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIsNone(res.data["cart"])

    def test_current_cart_requires_order_type(self):
        self.login(self.user)

        res = self.client.get(self.current_url)

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_then_lookup(self):
        self.login(self.user)

        res = self.client.post(
            self.create_url,
            {"order_type": "default", "store_id": str(self.store.pk)},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["customer_id"], self.user.pk)
        self.assertEqual(res.data["order_type"], "default")
        self.assertEqual(res.data["store_id"], str(self.store.pk))
        self.assertEqual(res.data["state"], Order.STATE_DRAFT)
        self.assertTrue(res.data["cart"])

        lookup = self.client.get(
            self.current_url,
            {"order_type": "default", "store_id": str(self.store.pk)},
        )
        self.assertEqual(lookup.data["cart"]["id"], res.data["id"])

    def test_duplicate_current_cart_is_409(self):
        self.login(self.user)
        existing = make_cart(store=self.store, customer=self.user)

        res = self.client.post(self.create_url, {"order_type": "default"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "DUPLICATE_CURRENT_CART")
        self.assertEqual(res.data["error"]["cart_id"], existing.pk)
        self.assertIn("already exists", res.data["error"]["message"])
        self.assertEqual(Order.objects.filter(customer=self.user).count(), 1)

    def test_other_store_and_order_type_do_not_conflict(self):
        self.login(self.user)
        make_cart(store=self.store, customer=self.user)

        res = self.client.post(
            self.create_url,
            {"order_type": "default", "store_id": str(self.store2.pk)},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)

        res = self.client.post(self.create_url, {"order_type": "wholesale"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)

    def test_archived_carts_do_not_block_creation(self):
        self.login(self.user)
        make_cart(store=self.store, customer=self.user, non_current_cart=True)

        res = self.client.post(self.create_url, {"order_type": "default"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)

    def test_unknown_order_type_is_404(self):
        self.login(self.user)

        res = self.client.post(self.create_url, {"order_type": "nope"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_unknown_store_is_404(self):
        self.login(self.user)

        res = self.client.post(
            self.create_url,
            {"order_type": "default", "store_id": str(uuid.uuid4())},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_invalid_store_id_is_400(self):
        self.login(self.user)

        res = self.client.post(
            self.create_url,
            {"order_type": "default", "store_id": "not-a-uuid"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_without_any_store_is_400(self):
        self.login(self.user)
        Store.objects.all().delete()

        res = self.client.post(self.create_url, {"order_type": "default"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("store_id", res.data)
        self.assertFalse(Order.objects.exists())

    def test_guest_duplicate_is_409(self):
        first = self.client.post(self.create_url, {"order_type": "default"}, format="json")
        second = self.client.post(self.create_url, {"order_type": "default"}, format="json")

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(first.data["customer_id"])
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(second.data["error"]["cart_id"], first.data["id"])


# --------------------------------------------------
# Archive / restore
# --------------------------------------------------


class ArchiveRestoreTests(CartAPIBaseTestCase):
    def test_archive_then_create_then_restore_conflicts(self):
        self.login(self.user)
        cart = make_cart(store=self.store, customer=self.user)

        res = self.client.post(reverse("cart_advanced:archive-cart", args=[cart.pk]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res.data["non_current_cart"])

        res = self.client.post(
            reverse("cart_advanced:create-cart"), {"order_type": "default"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        new_id = res.data["id"]

        res = self.client.post(reverse("cart_advanced:restore-cart", args=[cart.pk]))
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["cart_id"], new_id)

    def test_restore_without_conflict(self):
        self.login(self.user)
        cart = make_cart(store=self.store, customer=self.user, non_current_cart=True)

        res = self.client.post(reverse("cart_advanced:restore-cart", args=[cart.pk]))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertFalse(res.data["non_current_cart"])
        cart.refresh_from_db()
        self.assertFalse(cart.non_current_cart)

    def test_cannot_archive_someone_elses_cart(self):
        self.login(self.other)
        cart = make_cart(store=self.store, customer=self.user)

        res = self.client.post(reverse("cart_advanced:archive-cart", args=[cart.pk]))

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        cart.refresh_from_db()
        self.assertFalse(cart.non_current_cart)


# --------------------------------------------------
# Settings
# --------------------------------------------------


class CartSettingsTests(CartAPIBaseTestCase):
    def setUp(self):
        super().setUp()
        self.url = reverse("cart_advanced:settings")

    def test_guest_and_customer_are_denied(self):
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

        self.login(self.user)
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_reads_default(self):
        self.login(self.admin)

        res = self.client.get(self.url)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res.data["display_non_current_carts"])

    def test_admin_updates_setting(self):
        self.login(self.admin)

        res = self.client.patch(self.url, {"display_non_current_carts": False}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertFalse(res.data["display_non_current_carts"])
        self.assertFalse(CartAdvancedSettings.load().display_non_current_carts)
        self.assertEqual(CartAdvancedSettings.objects.count(), 1)

        res = self.client.put(self.url, {"display_non_current_carts": True}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(CartAdvancedSettings.load().display_non_current_carts)
        self.assertEqual(CartAdvancedSettings.objects.count(), 1)


# --------------------------------------------------
# Permission / request scoping
# --------------------------------------------------


class CanViewCartTests(TestCase):
    def setUp(self):
        self.store = make_store("Main", is_default=True)
        make_order_type("default")
        self.user = make_user("customer")
        self.permission = CanViewCart()

    def _request(self, user=None, session=None):
        request = RequestFactory().get("/")
        request.user = user or AnonymousUser()
        request.session = session if session is not None else SessionStore()
        return request

    def test_guest_cart_requires_session_entry(self):
        cart = make_cart(store=self.store)
        session = SessionStore()

        self.assertFalse(self.permission.has_object_permission(self._request(session=session), None, cart))

        SessionCartSession(session).add_cart_id(cart.pk)
        self.assertTrue(self.permission.has_object_permission(self._request(session=session), None, cart))

    def test_guest_cannot_view_customer_cart_even_with_session_entry(self):
        cart = make_cart(store=self.store, customer=self.user)
        session = SessionStore()
        SessionCartSession(session).add_cart_id(cart.pk)

        self.assertFalse(self.permission.has_object_permission(self._request(session=session), None, cart))

    def test_non_cart_draft_is_denied(self):
        cart = make_cart(store=self.store, customer=self.user, cart=False)

        self.assertFalse(self.permission.has_object_permission(self._request(self.user), None, cart))

    def test_placed_order_is_denied_even_to_owner(self):
        cart = make_cart(store=self.store, customer=self.user)
        self.assertTrue(self.permission.has_object_permission(self._request(self.user), None, cart))

        cart.state = Order.STATE_PLACED
        self.assertFalse(self.permission.has_object_permission(self._request(self.user), None, cart))

    def test_locked_cart_is_denied_until_unlocked(self):
        cart = make_cart(store=self.store, customer=self.user)

        cart.lock()
        self.assertFalse(self.permission.has_object_permission(self._request(self.user), None, cart))

        cart.unlock()
        self.assertTrue(self.permission.has_object_permission(self._request(self.user), None, cart))

    def test_resolver_is_shared_within_a_request(self):
        request = self._request(self.user)

        self.assertIs(get_cart_resolver(request), get_cart_resolver(request))
        self.assertIsNot(get_cart_resolver(request), get_cart_resolver(self._request(self.user)))
