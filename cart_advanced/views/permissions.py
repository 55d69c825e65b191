from rest_framework.permissions import BasePermission

from cart_advanced.services.cart_session import SessionCartSession
from orders.models import Order


class CanViewCart(BasePermission):
    """
    Allows access to a cart only when all of these hold:
    - the visitor owns it (guests: the cart has no customer AND its id is in
      the guest's session, since every guest cart has the same empty owner)
    - it is still a cart (draft state, cart flag set), not a placed order
    - it is not locked (e.g. the customer is off-site paying)
    """

    message = "You do not have access to this cart."

    def has_object_permission(self, request, view, obj: Order):
        user = request.user

        if user and user.is_authenticated:
            is_owner = obj.customer_id == user.pk
        else:
            is_owner = obj.customer_id is None and SessionCartSession(
                request.session
            ).has_cart_id(obj.pk)

        return is_owner and obj.is_cart and not obj.locked
