"""Simulated payment processor.

Every charge succeeds unless the processor has been told to decline, which
tests use to exercise the placement failure path. The most recent charges
are kept in ``charges``.
"""

from collections import deque
from uuid import uuid4

from storefront.payment.port import ChargeResult, PaymentProcessor


class SimulatedProcessor(PaymentProcessor):
    HISTORY_SIZE = 1000

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment declined"
        self.charges: deque[dict] = deque(maxlen=self.HISTORY_SIZE)

    def configure(self, should_succeed: bool, failure_reason: str = "Payment declined") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def charge(self, amount: float, payment_method: str, order_id: str) -> ChargeResult:
        self.charges.append(
            {
                "amount": amount,
                "payment_method": payment_method,
                "order_id": order_id,
            }
        )

        if self.should_succeed:
            return ChargeResult(success=True, reference=f"sim_{uuid4().hex[:12]}")
        return ChargeResult(success=False, failure_reason=self.failure_reason)
