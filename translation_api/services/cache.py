"""Cache layer shared by the repositories and the translation service.

Values are stored as JSON so Redis and the in-process backend hand back the
same shapes. Errors talking to Redis are logged and treated as a miss; the
database stays the source of truth.
"""

import json
import logging
import threading
import time

import redis

logger = logging.getLogger(__name__)

DEFAULT_TTL = 3600  # 1 hour
DEFAULT_PREFIX = 'translations:'


class TranslationCache:
    """Key/value contract consumed by the repositories."""

    def __init__(self, prefix: str = DEFAULT_PREFIX, default_ttl: int = DEFAULT_TTL):
        self.prefix = prefix
        self.default_ttl = default_ttl

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str):
        raise NotImplementedError

    def set(self, key: str, value, ttl: int | None = None) -> None:
        raise NotImplementedError

    def has(self, key: str) -> bool:
        raise NotImplementedError

    def delete(self, *keys: str) -> None:
        raise NotImplementedError

    def clear_all(self) -> None:
        raise NotImplementedError

    def remember(self, key: str, loader, ttl: int | None = None):
        """Return the cached value for key, or load, store and return it.

        None results are never stored.
        """
        value = self.get(key)
        if value is not None:
            return value

        value = loader()
        if value is not None:
            self.set(key, value, ttl)
        return value


class RedisCache(TranslationCache):
    """Redis backed cache using SETEX for expiry."""

    def __init__(self, client, prefix: str = DEFAULT_PREFIX, default_ttl: int = DEFAULT_TTL):
        super().__init__(prefix, default_ttl)
        self.client = client

    def get(self, key: str):
        try:
            raw = self.client.get(self._key(key))
        except redis.RedisError as e:
            logger.error(f"Redis get error for {key}: {e}")
            return None

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding undecodable cache entry {key}")
            return None

    def set(self, key: str, value, ttl: int | None = None) -> None:
        try:
            self.client.setex(self._key(key), ttl or self.default_ttl, json.dumps(value))
        except redis.RedisError as e:
            logger.error(f"Redis set error for {key}: {e}")

    def has(self, key: str) -> bool:
        try:
            return self.client.exists(self._key(key)) > 0
        except redis.RedisError as e:
            logger.error(f"Redis exists error for {key}: {e}")
            return False

    def delete(self, *keys: str) -> None:
        if not keys:
            return
        try:
            self.client.delete(*[self._key(k) for k in keys])
        except redis.RedisError as e:
            logger.error(f"Redis delete error: {e}")

    def clear_all(self) -> None:
        """Remove every key under this cache's prefix."""
        try:
            pipe = self.client.pipeline()
            for raw_key in self.client.scan_iter(match=f"{self.prefix}*", count=500):
                pipe.delete(raw_key)
            pipe.execute()
        except redis.RedisError as e:
            logger.error(f"Redis clear error: {e}")


class NullCache(TranslationCache):
    """Pass-through backend: every read misses, every write is dropped.

    Used outside tests when Redis is unavailable, so several worker
    processes never serve entries another worker has invalidated.
    """

    def get(self, key: str):
        return None

    def set(self, key: str, value, ttl: int | None = None) -> None:
        pass

    def has(self, key: str) -> bool:
        return False

    def delete(self, *keys: str) -> None:
        pass

    def clear_all(self) -> None:
        pass


class MemoryCache(TranslationCache):
    """Process-local cache for tests and single-process tooling."""

    def __init__(self, prefix: str = DEFAULT_PREFIX, default_ttl: int = DEFAULT_TTL):
        super().__init__(prefix, default_ttl)
        self._entries = {}
        self._lock = threading.Lock()

    def _live_entry(self, full_key):
        entry = self._entries.get(full_key)
        if entry is None:
            return None
        expires_at, raw = entry
        if expires_at <= time.monotonic():
            del self._entries[full_key]
            return None
        return raw

    def get(self, key: str):
        with self._lock:
            raw = self._live_entry(self._key(key))
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value, ttl: int | None = None) -> None:
        expires_at = time.monotonic() + (ttl or self.default_ttl)
        raw = json.dumps(value)
        with self._lock:
            self._entries[self._key(key)] = (expires_at, raw)

    def has(self, key: str) -> bool:
        with self._lock:
            return self._live_entry(self._key(key)) is not None

    def delete(self, *keys: str) -> None:
        with self._lock:
            for key in keys:
                self._entries.pop(self._key(key), None)

    def clear_all(self) -> None:
        with self._lock:
            for full_key in [k for k in self._entries if k.startswith(self.prefix)]:
                del self._entries[full_key]


def build_cache(app) -> TranslationCache:
    """Create the cache backend for an application.

    Uses Redis when REDIS_URL is set and answers PING. Otherwise caching is
    turned off (NullCache), except under TESTING where the in-process cache
    is used.
    """
    prefix = app.config.get('CACHE_KEY_PREFIX', DEFAULT_PREFIX)
    ttl = app.config.get('TRANSLATION_CACHE_TTL', DEFAULT_TTL)
    redis_url = app.config.get('REDIS_URL')

    if not redis_url:
        if not app.config.get('TESTING'):
            logger.warning("REDIS_URL not set - translation caching disabled")
        return _fallback_cache(app, prefix, ttl)

    try:
        client = redis.from_url(redis_url, decode_responses=True)
        # Test connection
        client.ping()
        logger.info("Redis connected successfully")
        return RedisCache(client, prefix=prefix, default_ttl=ttl)
    except redis.RedisError as e:
        logger.error(f"Redis connection failed: {e} - translation caching disabled")
        return _fallback_cache(app, prefix, ttl)


def _fallback_cache(app, prefix, ttl) -> TranslationCache:
    if app.config.get('TESTING'):
        return MemoryCache(prefix=prefix, default_ttl=ttl)
    return NullCache(prefix=prefix, default_ttl=ttl)


def get_cache() -> TranslationCache:
    """Return the cache of the current Flask application."""
    from flask import current_app
    return current_app.extensions['translation_cache']
