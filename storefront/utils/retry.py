# storefront/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import requests
import redis

from storefront.utils.settings import CATALOG_RETRY_ATTEMPTS, REDIS_RETRY_ATTEMPTS


def catalog_retry():
    # tylko bledy sieci / 5xx katalogu, 404 to NotFoundError i nie jest ponawiany
    return retry(
        reraise=True,
        stop=stop_after_attempt(CATALOG_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(requests.RequestException),
    )


def lock_release_retry():
    # zwolnienie locka musi dojsc do redisa, inaczej koszyk czeka do konca TTL;
    # przejecie locka ponawia sama petla w LockService.user_lock
    return retry(
        reraise=True,
        stop=stop_after_attempt(REDIS_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(redis.RedisError),
    )
