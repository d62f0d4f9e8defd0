"""Redis client construction and helpers."""

import json
from typing import Any, cast

import redis
from fastapi import Request

from healx.config import Settings


def create_redis_client(settings: Settings) -> redis.Redis:
    """Build a Redis client from settings. Connections are opened lazily."""
    return redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        username=settings.redis_username,
        password=settings.redis_password,
        decode_responses=settings.redis_decode_responses,
        socket_connect_timeout=5,
        socket_keepalive=True,
        health_check_interval=30,
    )


def get_redis_client(request: Request) -> redis.Redis:
    """Return the Redis client attached to the running application."""
    return request.app.state.redis


def check_redis_connection(client: redis.Redis) -> bool:
    """Return True when Redis answers a ping."""
    try:
        client.ping()
        return True
    except Exception:
        return False


class RateLimiter:
    """Fixed-window counter rate limiter."""

    def __init__(self, redis_client: redis.Redis):
        """Initialize rate limiter with Redis client."""
        self.redis = redis_client

    def check_rate_limit(
        self,
        key: str,
        limit: int,
        window: int = 60,
    ) -> bool:
        """
        Check if rate limit is exceeded.

        Args:
            key: Rate limit key (e.g. ``login:<email>``)
            limit: Maximum number of requests
            window: Time window in seconds

        Returns:
            True if within limit, False if exceeded
        """
        try:
            current = cast(str | None, self.redis.get(key))

            if current is None:
                self.redis.setex(key, window, 1)
                return True

            if int(current) >= limit:
                return False

            self.redis.incr(key)
            return True
        except (redis.RedisError, ValueError, TypeError):
            # Fail open when Redis is unreachable
            return True


class CacheManager:
    """JSON cache over Redis. Every failure degrades to a cache miss."""

    def __init__(self, redis_client: redis.Redis):
        """Initialize cache manager with Redis client."""
        self.redis = redis_client

    def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """Set a raw string value, optionally with a TTL in seconds."""
        try:
            if ttl:
                self.redis.setex(key, ttl, value)
            else:
                self.redis.set(key, value)
            return True
        except redis.RedisError:
            return False

    def delete(self, key: str) -> bool:
        """Delete key from cache."""
        try:
            self.redis.delete(key)
            return True
        except redis.RedisError:
            return False

    def exists(self, key: str) -> bool:
        """Check if key exists in cache."""
        try:
            return bool(self.redis.exists(key))
        except redis.RedisError:
            return False

    def get_json(self, key: str) -> Any | None:
        """Get a JSON value and deserialize it, or None on miss."""
        try:
            value = self.redis.get(key)
            if isinstance(value, str | bytes) and value:
                return json.loads(value)
            return None
        except (redis.RedisError, ValueError):
            return None

    def set_json(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Serialize and store a JSON value."""
        return self.set(key, json.dumps(value, default=str), ttl=ttl)

    def delete_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching a pattern.

        Args:
            pattern: Redis key pattern (e.g., 'doctor:list:*')

        Returns:
            Number of keys deleted
        """
        try:
            keys = cast(list[str], self.redis.keys(pattern))
            if keys:
                return cast(int, self.redis.delete(*keys))
            return 0
        except redis.RedisError:
            return 0
