from kombu.exceptions import OperationalError

from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Powiadomienia o oplaconych zamowieniach.
    Celery - wysylka poza cyklem zadania HTTP.
    """

    @staticmethod
    def send_order_notification(buyer_id: str, order_id: str):
        try:
            send_order_notification_task.delay(buyer_id, order_id)
        except OperationalError as e:
            #zamowienie juz oplacone - brak brokera nie moze zepsuc odpowiedzi
            logger.error(f"Could not queue notification for order {order_id}: {e}")


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(buyer_id: str, order_id: str):
    """
    Celery task - tylko loguje, email/push poza zakresem.
    """
    logger.info(f"[NOTIFICATION] Buyer {buyer_id}: order {order_id} has been paid")
    return {"buyer_id": buyer_id, "order_id": order_id, "status": "sent"}
