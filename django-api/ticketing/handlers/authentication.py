"""Identity from the upstream gateway.

The gateway authenticates users and forwards the result as headers; the
service never checks credentials itself.
"""

from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

from ticketing.domain import Role, UserIdentity

USER_ID_HEADER = "X-User-Id"
USER_ROLE_HEADER = "X-User-Role"
# matches Booking.user_id
MAX_USER_ID_LENGTH = 128


class GatewayUser:
    """Request user wrapping a UserIdentity for DRF permission checks."""

    is_authenticated = True
    is_anonymous = False

    def __init__(self, identity: UserIdentity) -> None:
        self.identity = identity

    @property
    def id(self) -> str:
        return self.identity.user_id

    @property
    def is_staff(self) -> bool:
        return self.identity.is_admin

    def __str__(self) -> str:
        return self.identity.user_id


class GatewayIdentityAuthentication(BaseAuthentication):
    """Authenticate from the X-User-Id / X-User-Role gateway headers."""

    def authenticate(self, request):
        user_id = request.headers.get(USER_ID_HEADER, "").strip()
        if not user_id:
            return None
        if len(user_id) > MAX_USER_ID_LENGTH:
            raise AuthenticationFailed("User id too long")

        raw_role = request.headers.get(USER_ROLE_HEADER, Role.USER.value).strip().upper()
        try:
            role = Role(raw_role)
        except ValueError:
            raise AuthenticationFailed("Unknown role")

        return (GatewayUser(UserIdentity(user_id=user_id, role=role)), None)

    def authenticate_header(self, request):
        return USER_ID_HEADER
