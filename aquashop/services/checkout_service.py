# aquashop/services/checkout_service.py
from aquashop.domain.errors import InvalidInput
from aquashop.domain.schemas import CustomerInfo, OrderCreate, OrderItemIn, OrderOut
from aquashop.services.cart_service import CartStore
from aquashop.services.order_service import OrderService
from aquashop.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Turns a cart snapshot into an order. Only after the order and all of its
    items were stored are the snapshotted lines taken out of the cart.
    """

    def __init__(self, order_service: OrderService):
        self.order_service = order_service

    def checkout(self, cart: CartStore, customer: CustomerInfo, customer_id: str) -> OrderOut:
        lines = cart.items
        if not lines:
            raise InvalidInput("Cannot check out an empty cart")

        payload = OrderCreate(
            **customer.model_dump(),
            items=[
                OrderItemIn(
                    product_id=line.id,
                    product_name=line.title,
                    product_type=line.product_type,
                    quantity=line.quantity,
                    price=line.price,
                    size=line.size,
                )
                for line in lines
            ],
        )

        logger.info(f"Checkout of {cart.name} for customer {customer_id}: {len(lines)} lines")
        order = self.order_service.create_order(payload, customer_id)

        #tylko zamowione pozycje, nowe dodane w trakcie zostaja w koszyku
        cart.remove_ordered(lines)
        return order
