from decimal import Decimal
from typing import Dict, Any, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from storefront.data.models.cart import CartModel, CART_ACTIVE
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import (
    NotFoundError,
    ValidationError,
    InsufficientStockError,
    EmptyCartError,
    ConflictError,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.checkout_service import CheckoutService
from storefront.services.notification_service import NotificationService
from storefront.services.product_service import product_to_dict
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

class CartService:
    """
    Prosta implementacja cqrs i proste use case dla domeny cart
    commands (add, update, remove, clear, checkout) modyfikuja stan
    query (get, history) tylko odczyt
    kazdy user ma max jeden aktywny koszyk, tworzony przy pierwszym dostepie
    """

    def __init__(
        self,
        db: Session,
        notification_service: NotificationService | None = None,
        checkout_service: CheckoutService | None = None,
    ):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)
        self.checkout_service = checkout_service or CheckoutService(
            cart_repo=self.repo,
            product_repo=self.products,
            notification_service=notification_service,
        )

    def _to_dict(self, cart: CartModel) -> Dict[str, Any]:
        items = self.repo.get_cart_items(cart.id)
        products = self.products.get_products_by_ids(i.product_id for i in items)

        #dict przyksztalcany w jsona
        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "status": cart.status,
            "items": [
                {
                    "product_id": i.product_id,
                    "product": product_to_dict(products[i.product_id]) if i.product_id in products else None,
                    "quantity": i.quantity,
                    "price": i.price,
                }
                for i in items
            ],
            "total": sum((i.price * i.quantity for i in items), Decimal("0.00")),
            "created_at": cart.created_at,
            "updated_at": cart.updated_at,
            "completed_at": cart.completed_at,
        }

    def _active_cart(self, user_id: int) -> CartModel:
        self.users.get_user_or_raise(user_id)

        existing = self.repo.get_active_cart_by_user(user_id)
        if existing:
            return existing

        try:
            created = self.repo.create_cart(
                CartModel(user_id=user_id, status=CART_ACTIVE, version=1, total=Decimal("0.00"))
            )
        except IntegrityError:
            # rownolegly request zdazyl zalozyc koszyk (unikalny indeks na aktywny koszyk)
            self.repo.rollback()
            return self.repo.get_active_cart_by_user(user_id)

        logger.info(f"Utworzono nowy koszyk {created.id} dla uzytkownika {user_id}")
        return created

    def _save(self, cart: CartModel) -> None:
        """Przelicza total i podbija wersje (optimistic locking), potem commit."""
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={
                "version": cart.version + 1,
                "total": self.repo.compute_total(cart.id),
            },
        )

        # np w bazie update set version 2 where id 1 and version 1
        if rowcount == 0:
            self.repo.rollback()
            raise ConflictError(
                "Cart was modified by another operation, please retry"
            )

        self.repo.commit()

    #query - odczyt
    def get_user_cart(self, user_id: int) -> Dict[str, Any]:
        return self._to_dict(self._active_cart(user_id))

    def get_history(self, user_id: int) -> List[Dict[str, Any]]:
        self.users.get_user_or_raise(user_id)
        return [self._to_dict(c) for c in self.repo.get_user_history(user_id)]

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int = 1) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationError([{"field": "quantity", "message": "Quantity must be at least 1"}])

        cart = self._active_cart(user_id)

        product = self.products.get_product(product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product not found")

        existing_item = self.repo.get_cart_item(cart.id, product_id)
        new_quantity = quantity + (existing_item.quantity if existing_item else 0)

        if product.stock < new_quantity:
            raise InsufficientStockError("Not enough stock available")

        try:
            if existing_item:
                logger.info(
                    f"Produkt {product_id} juz jest w koszyku, zwiekszam ilosc "
                    f"z {existing_item.quantity} do {new_quantity}"
                )
                # cena zostaje z pierwszego dodania
                existing_item.quantity = new_quantity
            else:
                logger.info(f"Dodaje nowy produkt {product_id} do koszyka {cart.id}")
                self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        product_id=product_id,
                        quantity=quantity,
                        price=product.price,
                    )
                )
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("Cart was modified by another operation, please retry")

        self._save(cart)
        return self.get_user_cart(user_id)

    def update_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            return self.remove_item(user_id, product_id)

        cart = self._active_cart(user_id)

        item = self.repo.get_cart_item(cart.id, product_id)
        if not item:
            raise NotFoundError("Cart item not found")

        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        if product.stock < quantity:
            raise InsufficientStockError("Not enough stock available")

        logger.info(f"Zmiana ilosci produktu {product_id} w koszyku {cart.id}: {item.quantity} -> {quantity}")
        item.quantity = quantity

        self._save(cart)
        return self.get_user_cart(user_id)

    def remove_item(self, user_id: int, product_id: int) -> Dict[str, Any]:
        cart = self._active_cart(user_id)

        logger.info(f"Usuwanie produktu {product_id} z koszyka {cart.id}")

        if self.repo.delete_cart_item(cart.id, product_id) == 0:
            self.repo.rollback()
            raise NotFoundError("Cart item not found")

        self._save(cart)
        return self.get_user_cart(user_id)

    def clear_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self._active_cart(user_id)

        removed = self.repo.delete_all_items(cart.id)
        self._save(cart)

        logger.info(f"Koszyk {cart.id} wyczyszczony ({removed} pozycji)")
        return self.get_user_cart(user_id)

    def checkout(self, user_id: int) -> Dict[str, Any]:
        cart = self._active_cart(user_id)

        #pusty koszyk odrzucamy zanim ruszy checkout
        if not self.repo.get_cart_items(cart.id):
            raise EmptyCartError("Cart is empty")

        return self.checkout_service.checkout(cart.id)
