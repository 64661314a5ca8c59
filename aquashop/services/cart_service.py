# aquashop/services/cart_service.py
import threading
from decimal import Decimal
from typing import Callable, List

from aquashop.domain.errors import InvalidInput, NotFound, OutOfStock
from aquashop.domain.schemas import (
    CART_SCHEMA_VERSION,
    PRODUCT_TYPES,
    CartLineItem,
    CartState,
    FishProduct,
)
from aquashop.repos.state_repo import StateStorage
from aquashop.services.catalog_client import CatalogClient
from aquashop.utils.logging import get_logger

logger = get_logger(__name__)

CART_RECORD = "cart-storage"


def extract_product_id(product_ref: str) -> str:
    """'fish_123' -> '123', a bare '123' is returned as is."""
    return product_ref.rsplit("_", 1)[-1]


class CartStore:
    """
    Koszyk trzymany po stronie klienta.

    State is an ordered tuple of lines plus a local version counter. Every
    mutation is computed against a (version, items) snapshot and committed
    with compare-and-swap on that version, then persisted as one blob. The
    catalog lookup in add_item runs outside the lock, so the merge decision is
    recomputed against the latest state if another mutation won the race.
    """

    def __init__(self, storage: StateStorage, catalog: CatalogClient, name: str = CART_RECORD):
        self.storage = storage
        self.catalog = catalog
        self.name = name
        self._lock = threading.Lock()
        self._version = 0
        self._items: tuple[CartLineItem, ...] = tuple(self._load())

    #query - odczyt
    @property
    def items(self) -> List[CartLineItem]:
        _, items = self._snapshot()
        return [i.model_copy() for i in items]

    @property
    def version(self) -> int:
        return self._version

    def subtotal(self) -> Decimal:
        _, items = self._snapshot()
        return sum((i.price * i.quantity for i in items), Decimal("0.00"))

    def item_count(self) -> int:
        _, items = self._snapshot()
        return sum(i.quantity for i in items)

    #commands
    def add_item(self, product_ref: str, product_type: str) -> CartLineItem:
        if not product_ref or not product_type:
            raise InvalidInput("Invalid product ID or type")

        if product_type not in PRODUCT_TYPES:
            raise InvalidInput(f"Unknown product type: {product_type}")

        product_id = extract_product_id(product_ref)
        if not product_id:
            raise InvalidInput(f"Invalid product reference: {product_ref}")

        logger.info(f"Pobieranie produktu {product_type}/{product_id} z katalogu")
        product = self.catalog.lookup(product_type, product_id)

        if product is None:
            raise NotFound(f"Product {product_type}/{product_id} not found")

        if not product.in_stock:
            raise OutOfStock(f"Product {product_type}/{product_id} is out of stock")

        fresh = CartLineItem(
            id=product_id,
            title=product.title,
            price=product.price,
            image_url=product.image_url or "",
            video_url=product.video_url,
            size=product.size if isinstance(product, FishProduct) else None,
            quantity=1,
            product_type=product_type,
        )
        result = {}

        def merge(items: list) -> list:
            for idx, line in enumerate(items):
                if line.key == fresh.key:
                    items[idx] = line.model_copy(update={"quantity": line.quantity + 1})
                    result["line"] = items[idx]
                    return items
            items.append(fresh)
            result["line"] = fresh
            return items

        self._mutate(merge)

        line = result["line"]
        logger.info(
            f"Produkt {product_type}/{product_id} w koszyku {self.name}, ilosc {line.quantity}"
        )
        return line.model_copy()

    def remove_item(self, item_id: str) -> bool:
        def drop(items: list) -> list | None:
            kept = [i for i in items if i.id != item_id]
            return kept if len(kept) != len(items) else None

        removed = self._mutate(drop)
        if removed:
            logger.info(f"Usunieto {item_id} z koszyka {self.name}")
        return removed

    def update_quantity(self, item_id: str, quantity: int) -> bool:
        if quantity < 1:
            return False

        def set_quantity(items: list) -> list | None:
            if not any(i.id == item_id for i in items):
                return None
            return [
                i.model_copy(update={"quantity": quantity}) if i.id == item_id else i
                for i in items
            ]

        return self._mutate(set_quantity)

    def clear_cart(self) -> None:
        self._mutate(lambda items: [])
        logger.info(f"Koszyk {self.name} wyczyszczony")

    def remove_ordered(self, ordered: List[CartLineItem]) -> None:
        """
        Take ordered lines out of the cart after checkout. Quantities are
        subtracted per (id, product_type), so anything added while the order
        was being submitted stays in the cart.
        """
        ordered_qty = {}
        for line in ordered:
            ordered_qty[line.key] = ordered_qty.get(line.key, 0) + line.quantity

        def subtract(items: list) -> list | None:
            left = []
            for line in items:
                remaining = line.quantity - ordered_qty.get(line.key, 0)
                if remaining == line.quantity:
                    left.append(line)
                elif remaining > 0:
                    left.append(line.model_copy(update={"quantity": remaining}))
            return left if left != items else None

        self._mutate(subtract)
        logger.info(f"Zamowione pozycje usuniete z koszyka {self.name}")

    # =====================================================
    # state / persistence
    # =====================================================
    def _snapshot(self) -> tuple[int, tuple[CartLineItem, ...]]:
        with self._lock:
            return self._version, self._items

    def _mutate(self, change: Callable[[list], list | None]) -> bool:
        """Apply change to the latest state; None from change means no-op."""
        while True:
            version, items = self._snapshot()
            updated = change(list(items))
            if updated is None:
                return False

            if self._compare_and_swap(version, updated):
                return True

            logger.warning(
                f"Konflikt wspolbieznosci w koszyku {self.name} (wersja {version}), ponawiam"
            )

    def _compare_and_swap(self, old_version: int, items: list) -> bool:
        with self._lock:
            if self._version != old_version:
                return False

            #zapis przed zmiana w pamieci, blad zapisu nie rusza stanu
            self.storage.save(self.name, self._serialize(items))
            self._items = tuple(items)
            self._version = old_version + 1
            return True

    @staticmethod
    def _serialize(items: list) -> dict:
        state = CartState(version=CART_SCHEMA_VERSION, cart_items=items)
        return state.model_dump(mode="json", by_alias=True, exclude_none=True)

    def _load(self) -> List[CartLineItem]:
        try:
            blob = self.storage.load(self.name)
        except ValueError as e:
            logger.warning(f"Unreadable {self.name} blob, starting with an empty cart: {e}")
            return []

        if blob is None:
            return []

        if not isinstance(blob, dict) or blob.get("version") != CART_SCHEMA_VERSION:
            version = blob.get("version") if isinstance(blob, dict) else None
            logger.warning(
                f"{self.name} schema version {version} != {CART_SCHEMA_VERSION}, discarding stored cart"
            )
            return []

        try:
            return CartState.model_validate(blob).cart_items
        except ValueError as e:
            logger.warning(f"Invalid {self.name} blob, starting with an empty cart: {e}")
            return []
