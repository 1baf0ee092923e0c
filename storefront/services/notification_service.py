# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_checkout_notification(user_id: int, cart_id: int, item_count: int):
        """
        Wysyła powiadomienie o zakończonym checkout.
        """
        send_checkout_notification_task.delay(user_id, cart_id, item_count)


@celery_app.task(name="storefront.services.notification_service.send_checkout_notification_task")
def send_checkout_notification_task(user_id: int, cart_id: int, item_count: int):
    """
    Celery task - w prawdziwym systemie wysłałby email z potwierdzeniem.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: cart {cart_id} checked out ({item_count} items)")

    return {"user_id": user_id, "cart_id": cart_id, "status": "sent"}
