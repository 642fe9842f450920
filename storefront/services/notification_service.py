# storefront/services/notification_service.py
from decimal import Decimal
from typing import Any, Dict

from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger
from storefront.utils.settings import NOTIFICATION_MAX_RETRIES, NOTIFICATION_RETRY_DELAY

logger = get_logger(__name__)


def order_placed_message(user_id: int, order_id: int, summary: Dict[str, Any]) -> str:
    if not summary:
        return f"User {user_id}: order {order_id} has been placed"
    return (
        f"User {user_id}: order {order_id} has been placed, "
        f"{summary['num_items']} item(s), total {Decimal(summary['total']):.2f}, "
        f"shipping to {summary['shipping_city']}"
    )


class NotificationService:
    """
    Order-placed notifications, delivered out of band by the Celery worker.
    Only JSON-safe values go on the wire.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, **summary):
        payload = {k: str(v) if isinstance(v, Decimal) else v for k, v in summary.items()}
        send_order_notification_task.delay(user_id, order_id, payload)


@celery_app.task(
    name="storefront.services.notification_service.send_order_notification_task",
    autoretry_for=(ConnectionError, TimeoutError),
    max_retries=NOTIFICATION_MAX_RETRIES,
    default_retry_delay=NOTIFICATION_RETRY_DELAY,
)
def send_order_notification_task(user_id: int, order_id: int, summary: Dict[str, Any] | None = None):
    """
    Delivery channel (email, SMS) plugs in here; until then the message is logged.
    Transient channel errors are retried by Celery.
    """
    message = order_placed_message(user_id, order_id, summary or {})
    logger.info(f"[NOTIFICATION] {message}")

    return {"user_id": user_id, "order_id": order_id, "message": message}
