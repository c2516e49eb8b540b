"""Error taxonomy for the storefront.

Rejections of bad input are Protean ``ValidationError`` subclasses so that
field-level validation raised by aggregates and commands travels the same
path. Everything else derives from ``StorefrontError``. Each class carries
the ``code`` reported to API clients and the HTTP status it maps to.
"""

from protean.exceptions import ValidationError


class StorefrontError(Exception):
    code = "InternalError"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InternalError(StorefrontError):
    pass


class NotAuthenticated(StorefrontError):
    code = "NotAuthenticated"
    status_code = 401


class NotAuthorized(StorefrontError):
    code = "NotAuthorized"
    status_code = 403


class NotEligibleToRate(StorefrontError):
    code = "NotEligibleToRate"
    status_code = 403


class AlreadyRated(StorefrontError):
    code = "AlreadyRated"
    status_code = 403


class NotFound(StorefrontError):
    code = "NotFound"
    status_code = 404


class PaymentDeclined(StorefrontError):
    code = "PaymentDeclined"
    status_code = 402


# ---------------------------------------------------------------------------
# Input rejections (HTTP 400)
# ---------------------------------------------------------------------------
class InvalidRequest(ValidationError):
    """A ValidationError with a single message filed under one key."""

    code = "ValidationError"
    status_code = 400
    field = "request"

    def __init__(self, message: str) -> None:
        super().__init__({self.field: [message]})
        self.message = message

    def __str__(self) -> str:
        return self.message


class EmptyCart(InvalidRequest):
    code = "EmptyCart"
    field = "items"

    def __init__(self, message: str = "No order items") -> None:
        super().__init__(message)


class IncompleteAddress(InvalidRequest):
    code = "IncompleteAddress"
    field = "shipping_address"

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Shipping address is incomplete, missing: {', '.join(self.missing)}")


class InvalidPaymentMethod(InvalidRequest):
    code = "InvalidPaymentMethod"
    field = "payment_method"

    def __init__(self, method: str | None) -> None:
        self.method = method
        super().__init__(f"Invalid payment method: {method!r}")


class ProductNotFound(InvalidRequest):
    code = "ProductNotFound"
    field = "items"

    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class InsufficientStock(InvalidRequest):
    code = "InsufficientStock"
    field = "items"

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(f"Not enough stock for {product_name}: requested {requested}, available {available}")


class InvalidStatusTransition(InvalidRequest):
    code = "InvalidStatusTransition"
    field = "status"

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot change order status from {current} to {target}")
