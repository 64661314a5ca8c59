# aquashop/services/wishlist_service.py
import threading
from typing import Callable, List

from aquashop.domain.errors import InvalidInput
from aquashop.domain.schemas import WishlistItem, WishlistState
from aquashop.repos.state_repo import StateStorage
from aquashop.utils.logging import get_logger

logger = get_logger(__name__)

WISHLIST_RECORD = "wishlist-storage"


class WishlistStore:
    """
    Persisted list of product snapshots, deduplicated by id.
    No remote reads: toggle resolves products through a local lookup.
    """

    def __init__(
        self,
        storage: StateStorage,
        product_lookup: Callable[[str], WishlistItem | None] | None = None,
        name: str = WISHLIST_RECORD,
    ):
        self.storage = storage
        self.product_lookup = product_lookup
        self.name = name
        self._lock = threading.Lock()
        self._items: List[WishlistItem] = self._load()

    @property
    def items(self) -> List[WishlistItem]:
        with self._lock:
            return [i.model_copy() for i in self._items]

    def contains(self, item_id: str) -> bool:
        with self._lock:
            return any(i.id == item_id for i in self._items)

    def add_item(self, item: WishlistItem) -> bool:
        if not item.id:
            raise InvalidInput("Wishlist item needs an id")

        with self._lock:
            if any(i.id == item.id for i in self._items):
                return False
            self._commit([*self._items, item.model_copy()])

        logger.info(f"Dodano {item.id} do {self.name}")
        return True

    def remove_item(self, item_id: str) -> bool:
        with self._lock:
            kept = [i for i in self._items if i.id != item_id]
            if len(kept) == len(self._items):
                return False
            self._commit(kept)

        logger.info(f"Usunieto {item_id} z {self.name}")
        return True

    def clear(self) -> None:
        with self._lock:
            self._commit([])

    def toggle(self, item_id: str, product: WishlistItem | None = None) -> bool:
        """Flip membership of item_id and return whether it is now in the wishlist."""
        if self.remove_item(item_id):
            return False

        if product is None and self.product_lookup is not None:
            product = self.product_lookup(item_id)

        if product is None:
            logger.warning(f"Produkt {item_id} nie znaleziony, {self.name} bez zmian")
            return False

        self.add_item(product)
        return True

    def _commit(self, items: List[WishlistItem]) -> None:
        blob = WishlistState(wishlist_items=items).model_dump(
            mode="json", by_alias=True, exclude_none=True
        )
        self.storage.save(self.name, blob)
        self._items = items

    def _load(self) -> List[WishlistItem]:
        try:
            blob = self.storage.load(self.name)
            if blob is None:
                return []
            return WishlistState.model_validate(blob).wishlist_items
        except ValueError as e:
            logger.warning(f"Invalid {self.name} blob, starting with an empty wishlist: {e}")
            return []
