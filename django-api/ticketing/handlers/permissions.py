import hmac

from django.conf import settings
from rest_framework.permissions import BasePermission

PAYMENT_SECRET_HEADER = "X-Payment-Secret"


class IsAdminRole(BasePermission):
    """Allows access only to callers with the ADMIN role."""

    def has_permission(self, request, view):
        identity = getattr(request.user, "identity", None)
        return bool(identity and identity.is_admin)


class HasPaymentCallbackSecret(BasePermission):
    """Allows access only to the payment channel holding the shared secret."""

    def has_permission(self, request, view):
        expected = settings.PAYMENT_CALLBACK_SECRET
        supplied = request.headers.get(PAYMENT_SECRET_HEADER, "")
        if not expected or not supplied:
            return False
        return hmac.compare_digest(supplied.encode(), expected.encode())
