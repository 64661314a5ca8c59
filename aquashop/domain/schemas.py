# aquashop/domain/schemas.py
from pydantic import BaseModel, BeforeValidator, Field, ConfigDict, TypeAdapter, model_validator
from pydantic.alias_generators import to_camel
from typing import Annotated, List, Literal, Union
from decimal import Decimal
from datetime import datetime


ProductType = Literal["fish", "food", "accessories"]
PRODUCT_TYPES = ("fish", "food", "accessories")

CART_SCHEMA_VERSION = 1


def _to_str(value):
    #ids come back from the catalog/db as int or uuid
    if value is None or isinstance(value, str):
        return value
    return str(value)


StrId = Annotated[str, BeforeValidator(_to_str)]


# =====================================================
# CATALOG (remote records, tagged by product type)
# =====================================================
class _CatalogProductBase(BaseModel):
    title: str = ""
    price: Decimal = Field(..., ge=0)
    stock_quantity: int = 0
    image_url: str | None = None
    video_url: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _title_from_name(cls, data):
        # food/accessories tables use "name" instead of "title"
        if isinstance(data, dict) and not data.get("title"):
            data = {**data, "title": data.get("name") or ""}
        return data

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0


class FishProduct(_CatalogProductBase):
    product_type: Literal["fish"] = "fish"
    size: str | None = None


class FoodProduct(_CatalogProductBase):
    product_type: Literal["food"] = "food"


class AccessoryProduct(_CatalogProductBase):
    product_type: Literal["accessories"] = "accessories"


CatalogProduct = Annotated[
    Union[FishProduct, FoodProduct, AccessoryProduct],
    Field(discriminator="product_type"),
]

catalog_product_adapter = TypeAdapter(CatalogProduct)


# =====================================================
# CART / WISHLIST (local persisted state)
# =====================================================
class CartLineItem(BaseModel):
    """Line in the cart. price and title are snapshots taken when the item was added."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: StrId
    title: str
    price: Decimal
    image_url: str = ""
    video_url: str | None = None
    quantity: int = Field(1, ge=1)
    product_type: ProductType
    size: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return self.id, self.product_type


class CartState(BaseModel):
    """Persisted blob under the cart-storage record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    version: int = CART_SCHEMA_VERSION
    cart_items: List[CartLineItem] = Field(default_factory=list)


class WishlistItem(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: StrId
    name: str
    price: Decimal
    image_url: str = ""
    video_url: str | None = None
    category: str = ""


class WishlistState(BaseModel):
    """Persisted blob under the wishlist-storage record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    wishlist_items: List[WishlistItem] = Field(default_factory=list)


# =====================================================
# API - cart / wishlist
# =====================================================
class AddItemIn(BaseModel):
    """Dodanie produktu do koszyka, product_ref moze byc "fish_12" albo "12"."""

    product_ref: str = Field(..., description="Bare product id or <type>_<id> token")
    product_type: str = Field(..., description="fish | food | accessories")


class QuantityIn(BaseModel):
    quantity: int


class CartOut(BaseModel):
    owner_id: str
    items: List[CartLineItem]
    subtotal: Decimal
    item_count: int
    version: int


class WishlistOut(BaseModel):
    owner_id: str
    items: List[WishlistItem]


class ToggleOut(BaseModel):
    item_id: str
    in_wishlist: bool


# =====================================================
# ORDERS
# =====================================================
class CustomerInfo(BaseModel):
    """Customer, shipping and payment fields copied onto the order header."""

    customer_name: str = ""
    customer_email: str = ""
    shipping_address: str = "Default Address"
    payment_method: str = "Cash on Delivery"


class CheckoutIn(CustomerInfo):
    customer_id: str = Field(..., min_length=1)


class OrderItemIn(BaseModel):
    product_id: StrId
    product_name: str
    product_type: ProductType
    quantity: int
    price: Decimal = Field(..., ge=0)
    size: str | None = None


class OrderCreate(CustomerInfo):
    """Schema dla tworzenia zamowienia."""

    items: List[OrderItemIn] = Field(default_factory=list)


class OrderItemOut(BaseModel):
    id: int
    order_id: int
    product_id: str
    product_name: str
    product_type: str
    quantity: int
    price: Decimal
    size: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Order header together with its line items."""

    id: int
    customer_id: str
    customer_name: str
    customer_email: str
    shipping_address: str
    total_amount: Decimal
    status: str
    payment_method: str
    payment_status: str
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemOut] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
