# storefront/services/lock_service.py
import uuid
from contextlib import contextmanager

import redis
from redis.exceptions import RedisError

from storefront.domain.errors import StorefrontError, UpstreamFailure
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL
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


def settlement_lock_key(order_id: str) -> str:
    return f"order:{order_id}:settlement"


def checkout_lock_key(checkout_id: str) -> str:
    return f"checkout:{checkout_id}:submit"


class LockService:
    """
    -blokada na rozliczenie zamowienia / wyslanie platnosci checkoutu
    -zwalnianie locka tylko przez wlasciciela (lua)
    """

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def acquire(self, key: str, owner: str, ttl: int) -> bool:
        logger.info(f"Acquire lock {key} for {owner}")
        #SET key owner NX EX ttl
        return bool(self.redis.set(name=key, value=owner, nx=True, ex=ttl))

    @redis_retry()
    def release(self, key: str, owner: str) -> bool:
        logger.info(f"Release lock {key} for {owner}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, owner)
        return bool(res)

    @contextmanager
    def hold(self, key: str, ttl: int, busy_error: type[StorefrontError]):
        owner = uuid.uuid4().hex
        try:
            locked = self.acquire(key, owner, ttl)
        except RedisError as e:
            logger.error(f"Lock backend unavailable for {key}: {e}")
            raise UpstreamFailure() from e

        if not locked:
            raise busy_error()

        try:
            yield
        finally:
            try:
                self.release(key, owner)
            except RedisError as e:
                #lock i tak wygasnie po ttl
                logger.warning(f"Failed to release lock {key}: {e}")
