"""Per-user state tracking for Locust load test scenarios."""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    user_id: str | None = None
    token: str | None = None
    product_ids: list[str] = field(default_factory=list)
    order_ids: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}


@dataclass
class AdminState:
    token: str | None = None
    pending_order_ids: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}
