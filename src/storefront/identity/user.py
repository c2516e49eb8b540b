"""User aggregate: the identity placing orders and rating products.

Authentication proper lives outside this service. A user carries an opaque
API token issued at registration, and a role that decides whether the
admin-only operations are available.
"""

import secrets
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, String

from storefront.domain import storefront


class UserRole(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@storefront.aggregate
class User:
    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254, unique=True)
    role: String(choices=UserRole, default=UserRole.CUSTOMER.value)
    api_token: String(max_length=128)
    created_at: DateTime()

    @classmethod
    def register(cls, name, email, role=UserRole.CUSTOMER.value):
        from storefront.identity.events import UserRegistered

        now = datetime.now(UTC)
        user = cls(
            name=name,
            email=email.strip().lower(),
            role=role,
            api_token=secrets.token_urlsafe(32),
            created_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                email=user.email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    @property
    def is_admin(self) -> bool:
        # Roles stored by older clients may be capitalised
        return (self.role or "").lower() == UserRole.ADMIN.value
