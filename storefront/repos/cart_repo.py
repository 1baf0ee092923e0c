# storefront/repos/cart_repo.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select, update, delete, func
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel, CART_ACTIVE, CART_COMPLETED
from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    # ---- odczyt

    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def get_active_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(
                CartModel.user_id == user_id,
                CartModel.status == CART_ACTIVE,
            )
        ).scalar_one_or_none()

    def get_cart_items(self, cart_id: int) -> list[CartItemModel]:
        return self.db.execute(
            select(CartItemModel)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.id)
        ).scalars().all()

    def get_cart_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_user_history(self, user_id: int) -> list[CartModel]:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.user_id == user_id, CartModel.status == CART_COMPLETED)
            .order_by(CartModel.completed_at.desc(), CartModel.id.desc())
        ).scalars().all()

    # ---- zapis (bez commita, commit robi serwis po optimistic lock)

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def add_cart_item(self, item: CartItemModel) -> None:
        self.db.add(item)
        self.db.flush()

    def delete_cart_item(self, cart_id: int, product_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_all_items(self, cart_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.cart_id == cart_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def compute_total(self, cart_id: int) -> Decimal:
        total = self.db.execute(
            select(func.coalesce(func.sum(CartItemModel.price * CartItemModel.quantity), 0))
            .where(CartItemModel.cart_id == cart_id)
        ).scalar_one()
        return Decimal(str(total)).quantize(Decimal("0.01"))

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        # update carts set ... version = old+1 where id = ? and version = old
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    # ---- mutatory uzywane przez checkout, idempotentne, z commitem

    def remove_item(self, cart_id: int, product_id: int) -> None:
        self.delete_cart_item(cart_id, product_id)
        self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id)
            .values(total=self.compute_total(cart_id), version=CartModel.version + 1)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()

    def mark_completed(self, cart_id: int) -> None:
        # warunek na status - drugie wywolanie nic nie zmienia
        self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.status == CART_ACTIVE)
            .values(
                status=CART_COMPLETED,
                completed_at=datetime.now(timezone.utc),
                version=CartModel.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        self.db.commit()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
