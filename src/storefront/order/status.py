"""Order status changes: commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import CancellationActor, Order
from storefront.shared.errors import Forbidden, NotFound, Unavailable
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    tracking_number = String(max_length=100)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_is_admin = Boolean(default=False)


def load_order(order_id) -> Order:
    order = current_domain.repository_for(Order)._dao.query.filter(id=str(order_id)).all().first
    if order is None:
        raise NotFound("Order not found")
    return order


@storefront.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        order = load_order(command.order_id)
        order.change_status(command.status, tracking_number=command.tracking_number)
        current_domain.repository_for(Order).add(order)

        logger.info("order_status_changed", order_id=str(order.id), status=order.status)
        return str(order.id)

    @handle(CancelOrder)
    def cancel_order(self, command):
        order = load_order(command.order_id)
        is_admin = bool(command.actor_is_admin)
        if not (is_admin or order.is_owned_by(command.actor_id)):
            raise Forbidden("Not authorized to cancel this order")
        if not is_admin and order.is_terminal:
            raise Unavailable(f"Order is already {order.status} and cannot be cancelled")

        order.cancel(CancellationActor.ADMIN.value if is_admin else CancellationActor.CUSTOMER.value)
        current_domain.repository_for(Order).add(order)

        logger.info("order_cancelled", order_id=str(order.id), cancelled_by=order.cancelled_by)
        return str(order.id)
