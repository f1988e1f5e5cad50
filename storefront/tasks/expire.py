# storefront/tasks/expire.py
from datetime import timedelta

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.services.cart_service import CartService
from storefront.utils.logging import get_logger
from storefront.utils.settings import CART_RESERVATION_TTL_SECONDS

logger = get_logger(__name__)


@celery_app.task(name="storefront.tasks.expire.release_abandoned_carts_task")
def release_abandoned_carts_task(ttl_seconds: int | None = None):
    ttl = CART_RESERVATION_TTL_SECONDS if ttl_seconds is None else ttl_seconds
    if ttl <= 0:
        logger.info("Cart reservation TTL disabled, nothing to release")
        return 0

    logger.info(f"Releasing carts untouched for more than {ttl}s")

    db = SessionLocal()
    try:
        released = CartService(db).release_abandoned_carts(timedelta(seconds=ttl))
    finally:
        db.close()

    logger.info(f"Released {released} abandoned carts")
    return released
