"""Payment processor port.

Order placement charges through this interface; the only shipped adapter is
the simulated processor, which settles every charge immediately.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ChargeResult:
    success: bool
    reference: str | None = None
    failure_reason: str | None = None


class PaymentProcessor(ABC):
    @abstractmethod
    def charge(self, amount: float, payment_method: str, order_id: str) -> ChargeResult:
        """Charge ``amount`` for ``order_id``. ``order_id`` doubles as the idempotency key."""
        ...
