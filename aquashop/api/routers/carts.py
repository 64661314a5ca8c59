#aquashop/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from aquashop.api.deps import StoreRegistry, get_registry
from aquashop.api.errors import to_http
from aquashop.data.database import get_db
from aquashop.domain.errors import StorefrontError
from aquashop.domain.schemas import AddItemIn, CartOut, CheckoutIn, OrderOut, QuantityIn
from aquashop.services.cart_service import CartStore
from aquashop.services.checkout_service import CheckoutService
from aquashop.services.notification_service import NotificationService
from aquashop.services.order_service import OrderService

router = APIRouter(prefix="/carts", tags=["carts"])


def _cart_out(owner_id: str, cart: CartStore) -> CartOut:
    return CartOut(
        owner_id=owner_id,
        items=cart.items,
        subtotal=cart.subtotal(),
        item_count=cart.item_count(),
        version=cart.version,
    )


@router.get("/{owner_id}", response_model=CartOut)
def get_cart(owner_id: str, registry: StoreRegistry = Depends(get_registry)):
    try:
        return _cart_out(owner_id, registry.cart(owner_id))
    except StorefrontError as e:
        raise to_http(e)


@router.post("/{owner_id}/items", response_model=CartOut)
def add_item(owner_id: str, payload: AddItemIn, registry: StoreRegistry = Depends(get_registry)):
    try:
        cart = registry.cart(owner_id)
        cart.add_item(payload.product_ref, payload.product_type)
        return _cart_out(owner_id, cart)
    except StorefrontError as e:
        raise to_http(e)


@router.patch("/{owner_id}/items/{item_id}", response_model=CartOut)
def update_quantity(
    owner_id: str,
    item_id: str,
    payload: QuantityIn,
    registry: StoreRegistry = Depends(get_registry),
):
    try:
        cart = registry.cart(owner_id)
        cart.update_quantity(item_id, payload.quantity)
        return _cart_out(owner_id, cart)
    except StorefrontError as e:
        raise to_http(e)


@router.delete("/{owner_id}/items/{item_id}", response_model=CartOut)
def remove_item(owner_id: str, item_id: str, registry: StoreRegistry = Depends(get_registry)):
    try:
        cart = registry.cart(owner_id)
        cart.remove_item(item_id)
        return _cart_out(owner_id, cart)
    except StorefrontError as e:
        raise to_http(e)


@router.delete("/{owner_id}", response_model=CartOut)
def clear_cart(owner_id: str, registry: StoreRegistry = Depends(get_registry)):
    try:
        cart = registry.cart(owner_id)
        cart.clear_cart()
        return _cart_out(owner_id, cart)
    except StorefrontError as e:
        raise to_http(e)


@router.post("/{owner_id}/checkout", response_model=OrderOut, status_code=201)
def checkout(
    owner_id: str,
    payload: CheckoutIn,
    registry: StoreRegistry = Depends(get_registry),
    db: Session = Depends(get_db),
):
    """
    Sklada zamowienie z koszyka, koszyk jest czyszczony tylko po sukcesie.
    """
    svc = CheckoutService(OrderService(db, NotificationService()))
    try:
        return svc.checkout(registry.cart(owner_id), payload, payload.customer_id)
    except StorefrontError as e:
        raise to_http(e)
