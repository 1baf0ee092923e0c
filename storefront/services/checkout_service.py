# storefront/services/checkout_service.py
from typing import Dict, Any, List

from storefront.data.models.cart import CART_ACTIVE
from storefront.domain.errors import NotFoundError, ConflictError
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.notification_service import NotificationService
from storefront.services.product_service import product_to_dict
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

INSUFFICIENT_STOCK = "insufficient stock"


class CheckoutService:
    """
    Zamiana pozycji koszyka na sprzedaz ze zdjeciem ze stanu.

    Kazda pozycja jest rozliczana osobno: odczyt stanu, potem atomowy
    UPDATE ... WHERE stock >= quantity z wlasnym commitem. Nie ma transakcji
    obejmujacej caly koszyk, wiec udane zdjecia ze stanu zostaja nawet gdy
    pozniejsza pozycja sie nie uda. Wynik raportuje obie listy.

    Po petli:
    - brak bledow -> koszyk completed (completed_at = teraz)
    - czesc udana -> z koszyka znikaja tylko udane pozycje, reszta czeka na retry
    - nic udanego -> koszyk bez zmian
    """

    def __init__(
        self,
        cart_repo: CartRepo,
        product_repo: ProductRepo,
        notification_service: NotificationService | None = None,
    ):
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.notification_service = notification_service

    def checkout(self, cart_id: int) -> Dict[str, Any]:
        # jedyny blad ktory przerywa caly checkout - nie ma koszyka
        cart = self.cart_repo.get_cart(cart_id)
        if not cart:
            raise NotFoundError("Cart not found")

        if cart.status != CART_ACTIVE:
            raise ConflictError("Cart is not active")

        user_id = cart.user_id

        #snapshot pozycji z momentu wywolania, bez ponownego pobierania per pozycja
        items = [
            (i.product_id, i.quantity, i.price)
            for i in self.cart_repo.get_cart_items(cart_id)
        ]
        products = {
            pid: product_to_dict(p)
            for pid, p in self.product_repo.get_products_by_ids(pid for pid, _, _ in items).items()
        }

        logger.info(f"Checkout koszyka {cart_id}: {len(items)} pozycji")

        success_items: List[Dict[str, Any]] = []
        failed_items: List[Dict[str, Any]] = []

        for product_id, quantity, price in items:
            snapshot = products.get(product_id)

            try:
                settled = self._settle_item(product_id, quantity)
            except Exception as e:
                self.cart_repo.rollback()
                logger.error(f"Blad przy pozycji {product_id} koszyka {cart_id}: {e}")
                failed_items.append({
                    "product_id": product_id,
                    "product": snapshot,
                    "quantity": quantity,
                    "reason": str(e) or "Processing error",
                })
                continue

            if settled:
                logger.info(f"Produkt {product_id} x{quantity} zdjety ze stanu (koszyk {cart_id})")
                success_items.append({
                    "product_id": product_id,
                    "product": snapshot,
                    "quantity": quantity,
                    # cena z koszyka, nie aktualna cena produktu
                    "price": price,
                })
            else:
                logger.info(f"Produkt {product_id} x{quantity}: brak stanu (koszyk {cart_id})")
                failed_items.append({
                    "product_id": product_id,
                    "product": snapshot,
                    "quantity": quantity,
                    "reason": INSUFFICIENT_STOCK,
                })

        completed_at = None

        if not failed_items:
            self.cart_repo.mark_completed(cart_id)
            completed_at = self.cart_repo.get_cart(cart_id).completed_at
            self._notify(user_id, cart_id, len(success_items))
        elif success_items:
            for item in success_items:
                self.cart_repo.remove_item(cart_id, item["product_id"])

        logger.info(
            f"Checkout koszyka {cart_id} zakonczony: "
            f"{len(success_items)} ok, {len(failed_items)} nieudanych"
        )

        return {
            "success": not failed_items,
            "cart_id": cart_id,
            "success_items": success_items,
            "failed_items": failed_items,
            "completed_at": completed_at,
        }

    def _settle_item(self, product_id: int, quantity: int) -> bool:
        stock = self.product_repo.get_current_stock(product_id)
        if stock < quantity:
            return False

        # odczyt wyzej moze byc juz nieaktualny, UPDATE sprawdza stan jeszcze raz
        return self.product_repo.decrement_stock_if_available(product_id, quantity)

    def _notify(self, user_id: int, cart_id: int, item_count: int) -> None:
        if self.notification_service is None:
            return
        try:
            self.notification_service.send_checkout_notification(user_id, cart_id, item_count)
        except Exception as e:
            logger.warning(f"Nie udalo sie wyslac powiadomienia dla koszyka {cart_id}: {e}")
