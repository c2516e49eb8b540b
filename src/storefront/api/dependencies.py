"""Request authentication.

Callers present ``Authorization: Bearer <token>``; the token is the one
issued at registration. Setting ``STOREFRONT_DISABLE_AUTH=true`` skips the
check and runs every request as a development administrator, looked up (or
created) by ``ADMIN_EMAIL``.
"""

import os

from fastapi import Depends, Header
from protean.utils.globals import current_domain

from storefront.exceptions import NotAuthenticated, NotAuthorized
from storefront.identity.registration import RegisterUser, user_for_email, user_for_token
from storefront.identity.user import User, UserRole
from storefront.utils.logging import add_context, get_logger

logger = get_logger(__name__)


def auth_disabled() -> bool:
    return os.environ.get("STOREFRONT_DISABLE_AUTH", "").lower() == "true"


def _dev_admin() -> User:
    email = os.environ.get("ADMIN_EMAIL", "dev@local")
    user = user_for_email(email)
    if user is None:
        logger.warning("Authentication disabled, creating development admin", email=email)
        user_id = current_domain.process(
            RegisterUser(
                name=os.environ.get("ADMIN_NAME", "Dev Admin"),
                email=email,
                role=UserRole.ADMIN.value,
            ),
            asynchronous=False,
        )
        user = current_domain.repository_for(User).get(user_id)
    return user


async def get_current_user(authorization: str | None = Header(default=None)) -> User:
    if auth_disabled():
        user = _dev_admin()
    else:
        scheme, _, token = (authorization or "").partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise NotAuthenticated("Not authorized, no token")

        user = user_for_token(token.strip())
        if user is None:
            raise NotAuthenticated("Not authorized, token failed")

    add_context(user_id=str(user.id))
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise NotAuthorized("Not authorized as an admin")
    return user
