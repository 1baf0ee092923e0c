from decimal import Decimal

import pytest

from conftest import make_user, make_product, set_stock
from storefront.data.models.cart import CartModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import (
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from storefront.services.cart_service import CartService


@pytest.fixture()
def svc(db):
    make_user(db, 1)
    return CartService(db)


class TestActiveCart:
    def test_cart_created_lazily_on_first_access(self, db, svc):
        assert db.query(CartModel).count() == 0

        cart = svc.get_user_cart(1)

        assert cart["status"] == "active"
        assert cart["items"] == []
        assert cart["total"] == Decimal("0.00")
        assert db.query(CartModel).count() == 1

    def test_same_cart_returned_on_next_access(self, svc):
        assert svc.get_user_cart(1)["cart_id"] == svc.get_user_cart(1)["cart_id"]

    def test_unknown_user(self, svc):
        with pytest.raises(NotFoundError):
            svc.get_user_cart(999)


class TestAddItem:
    def test_captures_price_snapshot(self, db, svc):
        p = make_product(db, price="19.99", stock=5)

        cart = svc.add_item(1, p.id, 2)

        assert cart["items"][0]["product_id"] == p.id
        assert cart["items"][0]["quantity"] == 2
        assert cart["items"][0]["price"] == Decimal("19.99")
        assert cart["items"][0]["product"]["name"] == "Keyboard"
        assert cart["total"] == Decimal("39.98")

    def test_adding_again_increments_quantity_and_keeps_price(self, db, svc):
        p = make_product(db, price="10.00", stock=5)
        svc.add_item(1, p.id, 1)
        db.get(ProductModel, p.id).price = Decimal("12.00")
        db.commit()

        cart = svc.add_item(1, p.id, 2)

        assert len(cart["items"]) == 1
        assert cart["items"][0]["quantity"] == 3
        assert cart["items"][0]["price"] == Decimal("10.00")

    def test_default_quantity_is_one(self, db, svc):
        p = make_product(db)

        cart = svc.add_item(1, p.id)

        assert cart["items"][0]["quantity"] == 1

    def test_rejects_quantity_over_stock(self, db, svc):
        p = make_product(db, stock=2)
        svc.add_item(1, p.id, 2)

        with pytest.raises(InsufficientStockError):
            svc.add_item(1, p.id, 1)

    def test_rejects_missing_and_inactive_products(self, db, svc):
        hidden = make_product(db, is_active=False)

        with pytest.raises(NotFoundError):
            svc.add_item(1, 4242, 1)
        with pytest.raises(NotFoundError):
            svc.add_item(1, hidden.id, 1)

    def test_rejects_non_positive_quantity(self, db, svc):
        p = make_product(db)

        with pytest.raises(ValidationError) as exc:
            svc.add_item(1, p.id, 0)
        assert exc.value.errors[0]["field"] == "quantity"

    def test_version_conflict(self, db, svc, monkeypatch):
        p = make_product(db)
        svc.get_user_cart(1)
        monkeypatch.setattr(svc.repo, "update_cart_version", lambda **kwargs: 0)

        with pytest.raises(ConflictError):
            svc.add_item(1, p.id, 1)
        assert svc.get_user_cart(1)["items"] == []

    def test_each_mutation_bumps_version(self, db, svc):
        p = make_product(db)
        cart_id = svc.get_user_cart(1)["cart_id"]

        svc.add_item(1, p.id, 1)
        svc.update_item(1, p.id, 3)

        db.expire_all()
        assert db.get(CartModel, cart_id).version == 3


class TestUpdateAndRemove:
    def test_update_quantity(self, db, svc):
        p = make_product(db, price="2.50", stock=10)
        svc.add_item(1, p.id, 1)

        cart = svc.update_item(1, p.id, 4)

        assert cart["items"][0]["quantity"] == 4
        assert cart["total"] == Decimal("10.00")

    def test_update_to_zero_removes_item(self, db, svc):
        p = make_product(db)
        svc.add_item(1, p.id, 1)

        cart = svc.update_item(1, p.id, 0)

        assert cart["items"] == []

    def test_update_checks_stock(self, db, svc):
        p = make_product(db, stock=3)
        svc.add_item(1, p.id, 1)

        with pytest.raises(InsufficientStockError):
            svc.update_item(1, p.id, 4)

    def test_update_missing_item(self, db, svc):
        p = make_product(db)

        with pytest.raises(NotFoundError):
            svc.update_item(1, p.id, 2)

    def test_remove_item(self, db, svc):
        a = make_product(db, "A")
        b = make_product(db, "B")
        svc.add_item(1, a.id, 1)
        svc.add_item(1, b.id, 1)

        cart = svc.remove_item(1, a.id)

        assert [i["product_id"] for i in cart["items"]] == [b.id]

    def test_remove_missing_item(self, svc):
        with pytest.raises(NotFoundError):
            svc.remove_item(1, 77)


class TestClearCart:
    def test_clear_empties_items_and_stays_active(self, db, svc):
        p = make_product(db)
        svc.add_item(1, p.id, 3)
        cart_id = svc.get_user_cart(1)["cart_id"]

        cart = svc.clear_cart(1)

        assert cart["cart_id"] == cart_id
        assert cart["status"] == "active"
        assert cart["items"] == []
        db.expire_all()
        assert db.get(CartModel, cart_id).total == Decimal("0.00")


class TestHistory:
    def test_history_lists_completed_carts_newest_first(self, db, svc):
        p = make_product(db, stock=10)
        svc.add_item(1, p.id, 1)
        first = svc.checkout(1)["cart_id"]
        svc.add_item(1, p.id, 2)
        second = svc.checkout(1)["cart_id"]
        svc.add_item(1, p.id, 1)  # still active, not part of history

        history = svc.get_history(1)

        assert [c["cart_id"] for c in history] == [second, first]
        assert all(c["status"] == "completed" for c in history)
        assert history[0]["items"][0]["quantity"] == 2

    def test_history_for_unknown_user(self, svc):
        with pytest.raises(NotFoundError):
            svc.get_history(999)

    def test_partial_checkout_not_in_history(self, db, svc):
        p = make_product(db, stock=2)
        svc.add_item(1, p.id, 2)
        set_stock(db, p.id, 0)
        svc.checkout(1)

        assert svc.get_history(1) == []
