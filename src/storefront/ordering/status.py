"""UpdateOrderStatus: administrators move orders through the lifecycle."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.exceptions import NotAuthorized
from storefront.ordering.order import Order
from storefront.ordering.transitions import get_policy
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id: Identifier(required=True)
    status: String(required=True, max_length=20)
    actor_role: String(required=True)


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        if (command.actor_role or "").lower() != "admin":
            raise NotAuthorized("Only administrators can change order status")

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        previous = order.status
        order.change_status(command.status, get_policy())
        repo.add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
        )
