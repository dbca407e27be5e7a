import time
import uuid
from contextlib import contextmanager

import redis

from storefront.domain.errors import CartBusyError
from storefront.utils.retry import lock_release_retry
from storefront.utils.settings import REDIS_URL, LOCK_TTL_SECONDS, LOCK_WAIT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje atomowo przez lua, skrypt dziala jako jedna nieprzerywalna operacja
#nie mozna wcisnac sie miedzy GET a DEL, wiec lock zwalnia tylko jego wlasciciel

_POLL_INTERVAL = 0.05


class LockService:
    """
    -lock na koszyk uzytkownika (jeden naraz na user_id)
    -zwalnianie locka tylko przez wlasciciela (token)
    -atomowosc przy pomocy lua
    """

    def __init__(
        self,
        url: str | None = None,
        client: redis.Redis | None = None,
        ttl: int = LOCK_TTL_SECONDS,
        wait: float = LOCK_WAIT_SECONDS,
    ):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl
        self.wait = wait

    @staticmethod
    def _key(user_id: int) -> str:
        return f"cart:user:{user_id}:lock"

    def try_acquire(self, user_id: int, token: str) -> bool:
        #SET cart:user:1:lock "<token>" NX EX 10
        return bool(
            self.redis.set(
                name=self._key(user_id),
                value=token,
                nx=True,
                ex=self.ttl, #wygasa sam, gdyby proces padl z lockiem
            )
        )

    @lock_release_retry()
    def release(self, user_id: int, token: str) -> bool:
        res = self.redis.eval(_RELEASE_LUA, 1, self._key(user_id), token)
        return bool(res)

    @contextmanager
    def user_lock(self, user_id: int):
        token = uuid.uuid4().hex
        deadline = time.monotonic() + self.wait

        last_error = None

        while True:
            try:
                if self.try_acquire(user_id, token):
                    break
                last_error = None
            except redis.RedisError as e:
                # blad redisa traktujemy jak zajety lock i probujemy do deadline
                logger.warning(f"Blad redisa przy locku koszyka uzytkownika {user_id}: {e}")
                last_error = e

            if time.monotonic() >= deadline:
                if last_error is not None:
                    raise last_error
                logger.warning(f"Timeout przy czekaniu na lock koszyka uzytkownika {user_id}")
                raise CartBusyError(user_id)
            time.sleep(_POLL_INTERVAL)

        logger.debug(f"Acquire lock {self._key(user_id)}")
        try:
            yield
        finally:
            if not self.release(user_id, token):
                # TTL minal w trakcie operacji i ktos inny mogl przejac lock
                logger.warning(f"Lock {self._key(user_id)} wygasl przed zwolnieniem")
