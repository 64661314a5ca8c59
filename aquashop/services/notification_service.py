# aquashop/services/notification_service.py
from aquashop.celery_worker import celery_app
from aquashop.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Powiadomienia o zamowieniach, wysylane przez Celery.
    """

    @staticmethod
    def send_order_notification(customer_id: str, order_id: int):
        send_order_notification_task.delay(customer_id, order_id)


@celery_app.task(name="aquashop.services.notification_service.send_order_notification_task")
def send_order_notification_task(customer_id: str, order_id: int):
    """
    Only logs for now, a mail/SMS gateway would be called here.
    """
    logger.info(f"[NOTIFICATION] Customer {customer_id}: order {order_id} placed, status pending")

    return {"customer_id": customer_id, "order_id": order_id, "status": "sent"}
