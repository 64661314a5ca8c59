# aquashop/api/routers/wishlists.py
from fastapi import APIRouter, Body, Depends, HTTPException

from aquashop.api.deps import StoreRegistry, get_registry
from aquashop.api.errors import to_http
from aquashop.domain.errors import StorefrontError
from aquashop.domain.schemas import ToggleOut, WishlistItem, WishlistOut

router = APIRouter(prefix="/wishlists", tags=["wishlists"])


@router.get("/{owner_id}", response_model=WishlistOut)
def get_wishlist(owner_id: str, registry: StoreRegistry = Depends(get_registry)):
    try:
        return WishlistOut(owner_id=owner_id, items=registry.wishlist(owner_id).items)
    except StorefrontError as e:
        raise to_http(e)


@router.post("/{owner_id}/items", response_model=WishlistOut)
def add_item(owner_id: str, payload: WishlistItem, registry: StoreRegistry = Depends(get_registry)):
    try:
        wishlist = registry.wishlist(owner_id)
        wishlist.add_item(payload)
        return WishlistOut(owner_id=owner_id, items=wishlist.items)
    except StorefrontError as e:
        raise to_http(e)


@router.delete("/{owner_id}/items/{item_id}", response_model=WishlistOut)
def remove_item(owner_id: str, item_id: str, registry: StoreRegistry = Depends(get_registry)):
    try:
        wishlist = registry.wishlist(owner_id)
        wishlist.remove_item(item_id)
        return WishlistOut(owner_id=owner_id, items=wishlist.items)
    except StorefrontError as e:
        raise to_http(e)


@router.post("/{owner_id}/toggle/{item_id}", response_model=ToggleOut)
def toggle_item(
    owner_id: str,
    item_id: str,
    product: WishlistItem | None = Body(default=None),
    registry: StoreRegistry = Depends(get_registry),
):
    """
    Removes item_id if present, otherwise adds it. Adding needs the product in
    the body unless the registry was built with a local product lookup.
    """
    try:
        wishlist = registry.wishlist(owner_id)
        if product is None and registry.product_lookup is None and not wishlist.contains(item_id):
            raise HTTPException(status_code=422, detail="Product body is required to add to the wishlist")
        in_wishlist = wishlist.toggle(item_id, product)
        return ToggleOut(item_id=item_id, in_wishlist=in_wishlist)
    except StorefrontError as e:
        raise to_http(e)


@router.delete("/{owner_id}", response_model=WishlistOut)
def clear_wishlist(owner_id: str, registry: StoreRegistry = Depends(get_registry)):
    try:
        wishlist = registry.wishlist(owner_id)
        wishlist.clear()
        return WishlistOut(owner_id=owner_id, items=wishlist.items)
    except StorefrontError as e:
        raise to_http(e)
