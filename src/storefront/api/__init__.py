"""Storefront API package."""

from storefront.api.errors import register_error_handlers
from storefront.api.routes import analytics_router, order_router, product_router, user_router

__all__ = ["analytics_router", "order_router", "product_router", "register_error_handlers", "user_router"]
