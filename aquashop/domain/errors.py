# aquashop/domain/errors.py


class StorefrontError(Exception):
    """Base for every failure the cart/order subsystem reports to callers."""


class InvalidInput(StorefrontError, ValueError):
    pass


class NotFound(StorefrontError, LookupError):
    pass


class OutOfStock(StorefrontError):
    pass


class RemoteFailure(StorefrontError):
    """Transport or query error from the catalog, the order store or state storage."""


class OrderCreationFailed(StorefrontError):
    """Order header insert failed, nothing was written."""


class OrderItemsFailed(StorefrontError):
    """Line item insert failed, the header was deleted again."""

    def __init__(self, order_id: int, message: str | None = None):
        self.order_id = order_id
        super().__init__(message or f"Order items insert failed, order {order_id} rolled back")


class CompensationFailed(StorefrontError):
    """
    Line item insert failed and deleting the header failed too.
    The header identified by order_id may still exist without any items.
    """

    def __init__(self, order_id: int, message: str | None = None):
        self.order_id = order_id
        super().__init__(
            message or f"Order items insert failed and order {order_id} could not be deleted"
        )
