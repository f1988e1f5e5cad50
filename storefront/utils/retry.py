# storefront/utils/retry.py
from sqlalchemy.exc import OperationalError
from tenacity import retry, stop_after_attempt, wait_exponential, wait_none, retry_if_exception_type

from storefront.domain.errors import OrderNumberCollision
from storefront.utils.settings import ORDER_NUMBER_MAX_ATTEMPTS


def read_retry():
    # tylko dla idempotentnych odczytow
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OperationalError),
    )


def order_number_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(ORDER_NUMBER_MAX_ATTEMPTS),
        wait=wait_none(),
        retry=retry_if_exception_type(OrderNumberCollision),
    )
