from __future__ import annotations

import time

import redis

from stockroom.core.config import settings
from stockroom.core.logging import get_logger

logger = get_logger(__name__)


class TokenBlacklist:
    """Revoked-token store, kept in Redis when configured and in memory otherwise."""

    def __init__(self, redis_url: str | None = None, prefix: str = "stockroom-jwt-bl") -> None:
        self._prefix = prefix
        self._store: dict[str, float] = {}
        self._redis: redis.Redis | None = None
        if redis_url:
            self._redis = redis.Redis.from_url(redis_url, decode_responses=True)

    def _key(self, jti: str) -> str:
        return f"{self._prefix}:{jti}"

    def add(self, jti: str, ttl_seconds: int) -> None:
        ttl = max(int(ttl_seconds), 1)
        if self._redis is not None:
            self._redis.setex(self._key(jti), ttl, "1")
            return
        self._purge()
        self._store[jti] = time.time() + ttl

    def contains(self, jti: str) -> bool:
        if self._redis is not None:
            return bool(self._redis.exists(self._key(jti)))
        expires_at = self._store.get(jti)
        if not expires_at:
            return False
        if expires_at < time.time():
            self._store.pop(jti, None)
            return False
        return True

    def clear(self) -> None:
        self._store.clear()

    def _purge(self) -> None:
        now = time.time()
        for jti in [key for key, expires_at in self._store.items() if expires_at < now]:
            self._store.pop(jti, None)


_blacklist: TokenBlacklist | None = None


def get_blacklist() -> TokenBlacklist:
    global _blacklist
    if _blacklist is None:
        _blacklist = TokenBlacklist(redis_url=settings.REDIS_URL)
        logger.info("Token blacklist initialised", extra={"backend": "redis" if settings.REDIS_URL else "memory"})
    return _blacklist


def revoke_token(jti: str, expires_in_seconds: int) -> None:
    if not settings.JWT_BLACKLIST_ENABLED or not jti:
        return
    ttl = max(int(expires_in_seconds) + settings.JWT_BLACKLIST_TTL_LEEWAY_SECONDS, 1)
    get_blacklist().add(jti, ttl)


def is_token_revoked(jti: str) -> bool:
    if not settings.JWT_BLACKLIST_ENABLED or not jti:
        return False
    return get_blacklist().contains(jti)
