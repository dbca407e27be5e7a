# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.domain.order_status import OrderStatus
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień o zmianie statusu zamówienia.
    Używa Celery do asynchronicznego przetwarzania, błąd kolejki tylko logujemy.
    """

    def notify(self, order, status: OrderStatus) -> bool:
        try:
            send_order_status_notification_task.apply_async(
                args=(order.user_id, order.email, order.reference, status.code),
                retry=False, #nie blokujemy zmiany statusu gdy broker lezy
            )
        except Exception as e:
            logger.error(
                f"Nie udalo sie zlecic powiadomienia o statusie {status.label} "
                f"zamowienia {order.reference}: {e}"
            )
            return False

        logger.info(f"Zlecono powiadomienie: zamowienie {order.reference} -> {status.label}")
        return True


def compose_message(reference: str, status: OrderStatus) -> dict:
    return {
        "subject": f"Order {reference}: {status.label}",
        "body": (
            f"Hello, your order {reference} is now {status.label}.\n"
            "Thank you for shopping with us."
        ),
    }


@celery_app.task(name="storefront.services.notification_service.send_order_status_notification_task")
def send_order_status_notification_task(user_id: int, email: str, reference: str, status_code: int):
    """
    Celery task - wysylka maila jest poza tym serwisem, tu skladamy tresc i logujemy.
    """
    status = OrderStatus.from_code(status_code)
    message = compose_message(reference, status)

    logger.info(f"[NOTIFICATION] User {user_id} <{email}>: {message['subject']}")

    return {"user_id": user_id, "reference": reference, "status": status.label, "sent": True}
