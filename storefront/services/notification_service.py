# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Powiadomienia po zlozeniu zamowienia.
    Celery - wysylka poza requestem; e-mail/SMS to zewnetrzny kolaborant.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, order_number: str):
        send_order_notification_task.delay(user_id, order_id, order_number)

    @staticmethod
    def send_checkout_session_notification(user_id: int, session_id: int):
        send_checkout_session_notification_task.delay(user_id, session_id)


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, order_number: str):
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_number} (id {order_id}) placed")
    return {"user_id": user_id, "order_id": order_id, "order_number": order_number, "status": "sent"}


@celery_app.task(name="storefront.services.notification_service.send_checkout_session_notification_task")
def send_checkout_session_notification_task(user_id: int, session_id: int):
    logger.info(f"[NOTIFICATION] User {user_id}: checkout session {session_id} awaiting payment")
    return {"user_id": user_id, "session_id": session_id, "status": "sent"}
