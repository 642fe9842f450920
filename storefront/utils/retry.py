# storefront/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type, before_sleep_log
import logging
import redis

from storefront.utils.logging import get_logger
from storefront.utils.settings import REDIS_RETRY_ATTEMPTS, REDIS_RETRY_MAX_WAIT

logger = get_logger(__name__)


def redis_retry(attempts: int | None = None, max_wait: float | None = None):
    """Retries transient Redis failures; the last error is re-raised as is."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or REDIS_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=max_wait or REDIS_RETRY_MAX_WAIT),
        retry=retry_if_exception_type(redis.RedisError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
