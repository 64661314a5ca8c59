"""
Shared fixtures.

The order store runs on an in-memory SQLite database, local state on
MemoryStorage, and the remote catalog is replaced by FakeCatalog.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STATE_BACKEND"] = "memory"
os.environ["REMOTE_RETRY_ATTEMPTS"] = "1"

import threading

import pytest
from sqlalchemy.orm import sessionmaker

from aquashop.celery_worker import celery_app
from aquashop.data.database import Base, engine
from aquashop.data.models import OrderItemModel, OrderModel  # noqa: F401
from aquashop.repos.state_repo import MemoryStorage
from aquashop.services.cart_service import CartStore
from aquashop.services.catalog_client import parse_catalog_record
from aquashop.services.wishlist_service import WishlistStore

celery_app.conf.task_always_eager = True


CATALOG_ROWS = {
    ("fish", "1"): {"title": "Super Red Arowana", "price": 10, "stock_quantity": 3,
                    "image_url": "/fish/1.jpg", "video_url": "/fish/1.mp4", "size": "6 inch"},
    ("fish", "2"): {"title": "Platinum Arowana", "price": 8500, "stock_quantity": 0,
                    "image_url": "/fish/2.jpg", "size": "8 inch"},
    ("food", "1"): {"name": "Arowana Pellets", "price": 5, "stock_quantity": 40,
                    "image_url": "/food/1.jpg"},
    ("accessories", "1"): {"name": "Canister Filter", "price": "149.99", "stock_quantity": 5},
}


class FakeCatalog:
    """Catalog gateway stand-in, optionally holding every lookup at a barrier."""

    def __init__(self, rows=None, barrier: threading.Barrier | None = None):
        self.rows = dict(CATALOG_ROWS if rows is None else rows)
        self.barrier = barrier
        self.calls = []

    def lookup(self, product_type, product_id):
        self.calls.append((product_type, product_id))
        if self.barrier is not None:
            self.barrier.wait(timeout=5)

        record = self.rows.get((product_type, product_id))
        if record is None:
            return None
        return parse_catalog_record(product_type, record)


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def cart(storage, catalog):
    return CartStore(storage, catalog)


@pytest.fixture
def wishlist(storage):
    return WishlistStore(storage)


@pytest.fixture
def db_session():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
