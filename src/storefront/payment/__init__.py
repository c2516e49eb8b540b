"""Payment processor factory.

``get_processor()`` returns the adapter named by ``PAYMENT_PROCESSOR``
(only ``simulated`` exists); ``set_processor()`` swaps it, for tests.
"""

import os

from storefront.payment.port import ChargeResult, PaymentProcessor
from storefront.payment.simulated import SimulatedProcessor

_current_processor: PaymentProcessor | None = None


def get_processor() -> PaymentProcessor:
    global _current_processor
    if _current_processor is None:
        adapter = os.environ.get("PAYMENT_PROCESSOR", "simulated")
        if adapter != "simulated":
            raise ValueError(f"Unknown payment processor: {adapter}")
        _current_processor = SimulatedProcessor()
    return _current_processor


def set_processor(processor: PaymentProcessor) -> None:
    """Override the active payment processor (useful for tests)."""
    global _current_processor
    _current_processor = processor


def reset_processor() -> None:
    global _current_processor
    _current_processor = None


__all__ = [
    "ChargeResult",
    "PaymentProcessor",
    "SimulatedProcessor",
    "get_processor",
    "reset_processor",
    "set_processor",
]
