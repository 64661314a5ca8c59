# aquashop/api/errors.py
from fastapi import HTTPException

from aquashop.domain.errors import (
    CompensationFailed,
    InvalidInput,
    NotFound,
    OrderCreationFailed,
    OrderItemsFailed,
    OutOfStock,
    RemoteFailure,
    StorefrontError,
)

_STATUS = [
    (InvalidInput, 400),
    (NotFound, 404),
    (OutOfStock, 409),
    (CompensationFailed, 500),
    (OrderItemsFailed, 502),
    (OrderCreationFailed, 502),
    (RemoteFailure, 502),
]


def to_http(error: StorefrontError) -> HTTPException:
    status = next((code for cls, code in _STATUS if isinstance(error, cls)), 500)

    if isinstance(error, (CompensationFailed, OrderItemsFailed)):
        return HTTPException(
            status_code=status,
            detail={"error": type(error).__name__, "message": str(error), "order_id": error.order_id},
        )
    return HTTPException(status_code=status, detail=str(error))
