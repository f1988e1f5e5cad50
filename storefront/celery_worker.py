# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import (
    CART_RESERVATION_TTL_SECONDS,
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_ALWAYS_EAGER,
)

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# taski musza byc zaimportowane, zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "storefront.tasks.expire",
    "storefront.services.notification_service",
)

# testy i dev bez brokera
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER

# rezerwacje w koszyku wygasaja tylko gdy TTL jest ustawiony
if CART_RESERVATION_TTL_SECONDS > 0:
    celery_app.conf.beat_schedule = {
        "release-abandoned-carts-every-minute": {
            "task": "storefront.tasks.expire.release_abandoned_carts_task",
            "schedule": 60.0,
        },
    }

celery_app.conf.timezone = "UTC"
