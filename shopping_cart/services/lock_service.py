import uuid
from contextlib import contextmanager

import redis
from redis.exceptions import RedisError

from shopping_cart.domain.errors import CartLockedError
from shopping_cart.utils.retry import redis_retry
from shopping_cart.utils.settings import REDIS_URL, CART_LOCK_TTL_SECONDS
from shopping_cart.utils.logging import get_logger

logger = get_logger(__name__)

#compare-and-delete in Lua, runs atomically on the redis side
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    Per-user mutex around mutating cart operations.
    Keeps two concurrent requests of one user from both acting on the same
    Active cart (e.g. a double checkout sending two orders).
    """

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(user_id) -> str:
        return f"cart:user:{user_id}:lock"

    @redis_retry()
    def acquire_user_lock(self, user_id, token: str, ttl: int) -> bool:
        key = self._key(user_id)
        logger.info(f"Acquire lock {key}")
        #SET cart:user:<id>:lock <token> NX EX <ttl>, expires on its own if we die
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release_user_lock(self, user_id, token: str) -> bool:
        key = self._key(user_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @contextmanager
    def user_lock(self, user_id, ttl: int = CART_LOCK_TTL_SECONDS):
        token = uuid.uuid4().hex
        if not self.acquire_user_lock(user_id, token, ttl):
            raise CartLockedError("Another operation on this cart is in progress")
        try:
            yield
        finally:
            try:
                self.release_user_lock(user_id, token)
            except RedisError as e:
                # the key still expires after ttl
                logger.warning(f"Failed to release lock for user {user_id}: {e}")
