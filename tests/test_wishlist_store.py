"""
Wishlist store tests.
"""
from decimal import Decimal

import pytest

from aquashop.domain.errors import InvalidInput
from aquashop.domain.schemas import WishlistItem
from aquashop.services.wishlist_service import WISHLIST_RECORD, WishlistStore


def make_item(item_id="fish_1", name="Super Red Arowana"):
    return WishlistItem(id=item_id, name=name, price=Decimal("1200"), image_url="/fish/1.jpg", category="fish")


class TestWishlistStore:

    def test_add_and_contains(self, wishlist, storage):
        assert wishlist.add_item(make_item()) is True

        assert wishlist.contains("fish_1")
        assert not wishlist.contains("fish_2")
        assert storage.load(WISHLIST_RECORD)["wishlistItems"][0]["imageUrl"] == "/fish/1.jpg"

    def test_duplicate_add_is_a_noop(self, wishlist, storage):
        wishlist.add_item(make_item())
        writes_before = storage.writes

        assert wishlist.add_item(make_item(name="Other name")) is False
        assert len(wishlist.items) == 1
        assert wishlist.items[0].name == "Super Red Arowana"
        assert storage.writes == writes_before

    def test_remove_absent_item_does_not_write(self, wishlist, storage):
        assert wishlist.remove_item("nope") is False
        assert storage.writes == 0

    def test_clear(self, wishlist):
        wishlist.add_item(make_item("a"))
        wishlist.add_item(make_item("b"))

        wishlist.clear()

        assert wishlist.items == []

    def test_item_without_id_is_rejected(self, wishlist):
        with pytest.raises(InvalidInput):
            wishlist.add_item(make_item(item_id=""))

    def test_toggle_reports_membership(self, wishlist):
        item = make_item()

        assert wishlist.toggle(item.id, item) is True
        assert wishlist.contains(item.id)

        assert wishlist.toggle(item.id) is False
        assert not wishlist.contains(item.id)

    def test_toggle_resolves_product_through_lookup(self, storage):
        cached = {"food_1": make_item("food_1", "Arowana Pellets")}
        wishlist = WishlistStore(storage, product_lookup=cached.get)

        assert wishlist.toggle("food_1") is True
        assert wishlist.items[0].name == "Arowana Pellets"

    def test_toggle_unknown_product_changes_nothing(self, wishlist, storage):
        assert wishlist.toggle("ghost") is False
        assert wishlist.items == []
        assert storage.writes == 0

    def test_state_survives_new_store(self, wishlist, storage):
        wishlist.add_item(make_item("a"))
        wishlist.add_item(make_item("b"))

        restored = WishlistStore(storage)

        assert [i.id for i in restored.items] == ["a", "b"]
