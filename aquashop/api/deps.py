# aquashop/api/deps.py
import threading
from collections import OrderedDict
from typing import Callable

from aquashop.domain.schemas import WishlistItem
from aquashop.repos.state_repo import MemoryStorage, RedisStorage, StateStorage, redis_client
from aquashop.services.cart_service import CartStore
from aquashop.services.catalog_client import CatalogClient
from aquashop.services.wishlist_service import WishlistStore
from aquashop.utils.settings import STATE_BACKEND, STORE_REGISTRY_SIZE
from aquashop.utils.logging import get_logger

logger = get_logger(__name__)


def default_storage_factory() -> Callable[[str], StateStorage]:
    #jeden klient redis / jeden slownik na proces, store dostaje tylko namespace
    if STATE_BACKEND == "memory":
        records = {}
        return lambda owner_id: MemoryStorage(namespace=f"owner:{owner_id}", records=records)

    client = redis_client()
    return lambda owner_id: RedisStorage(namespace=f"owner:{owner_id}", client=client)


class StoreRegistry:
    """
    Cart and wishlist stores per owner id, at most max_owners of each.
    The least recently used store is dropped when the limit is hit; its state
    is already persisted, so it is loaded again from storage on the next request.
    """

    def __init__(
        self,
        catalog: CatalogClient,
        storage_factory: Callable[[str], StateStorage],
        product_lookup: Callable[[str], WishlistItem | None] | None = None,
        max_owners: int = STORE_REGISTRY_SIZE,
    ):
        self.catalog = catalog
        self.storage_factory = storage_factory
        self.product_lookup = product_lookup
        self.max_owners = max_owners
        self._carts: OrderedDict[str, CartStore] = OrderedDict()
        self._wishlists: OrderedDict[str, WishlistStore] = OrderedDict()
        self._lock = threading.Lock()

    def _get_or_build(self, stores: OrderedDict, owner_id: str, build):
        with self._lock:
            if owner_id in stores:
                stores.move_to_end(owner_id)
                return stores[owner_id]

            store = build(self.storage_factory(owner_id))
            stores[owner_id] = store
            while len(stores) > self.max_owners:
                evicted, _ = stores.popitem(last=False)
                logger.info(f"Evicted store of owner {evicted}")
            return store

    def cart(self, owner_id: str) -> CartStore:
        return self._get_or_build(
            self._carts, owner_id, lambda storage: CartStore(storage, self.catalog)
        )

    def wishlist(self, owner_id: str) -> WishlistStore:
        return self._get_or_build(
            self._wishlists, owner_id, lambda storage: WishlistStore(storage, self.product_lookup)
        )

    def __len__(self) -> int:
        with self._lock:
            return len(set(self._carts) | set(self._wishlists))


_registry: StoreRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> StoreRegistry:
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = StoreRegistry(CatalogClient(), default_storage_factory())
        return _registry
