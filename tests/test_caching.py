"""Tests for the Redis cache and rate limiter helpers."""

from unittest.mock import MagicMock

import redis

from healx.core.redis_client import CacheManager, RateLimiter, check_redis_connection


def test_cache_manager_get_json():
    """Test CacheManager get_json method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    # Test cache miss
    mock_redis.get.return_value = None
    assert cache_manager.get_json("doctor:abc") is None
    mock_redis.get.assert_called_once_with("doctor:abc")

    # Test cache hit
    mock_redis.reset_mock()
    mock_redis.get.return_value = '{"name": "Dr. Amara Silva", "specialization": "Cardiology"}'
    result = cache_manager.get_json("doctor:abc")
    assert result == {"name": "Dr. Amara Silva", "specialization": "Cardiology"}


def test_cache_manager_get_json_tolerates_garbage():
    mock_redis = MagicMock()
    mock_redis.get.return_value = "{not json"
    assert CacheManager(mock_redis).get_json("doctor:abc") is None


def test_cache_manager_set_json():
    """Test CacheManager set_json method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    assert cache_manager.set_json("doctor:list:*all*", [{"name": "Dr. Amara Silva"}]) is True
    mock_redis.set.assert_called_once()

    mock_redis.reset_mock()
    assert cache_manager.set_json("doctor:abc", {"name": "Dr. Amara Silva"}, ttl=900) is True
    mock_redis.setex.assert_called_once_with("doctor:abc", 900, '{"name": "Dr. Amara Silva"}')


def test_cache_manager_swallows_redis_errors():
    mock_redis = MagicMock()
    mock_redis.setex.side_effect = redis.ConnectionError("down")
    mock_redis.get.side_effect = redis.ConnectionError("down")
    mock_redis.exists.side_effect = redis.ConnectionError("down")
    cache_manager = CacheManager(mock_redis)

    assert cache_manager.set("doctor:abc", "{}", ttl=60) is False
    assert cache_manager.get_json("doctor:abc") is None
    assert cache_manager.exists("revoked:refresh:token") is False


def test_cache_manager_delete_pattern():
    """Test CacheManager delete_pattern method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    mock_redis.keys.return_value = ["doctor:list:*all*", "doctor:list:cardiology"]
    mock_redis.delete.return_value = 2

    assert cache_manager.delete_pattern("doctor:list:*") == 2
    mock_redis.keys.assert_called_once_with("doctor:list:*")
    mock_redis.delete.assert_called_once_with("doctor:list:*all*", "doctor:list:cardiology")

    mock_redis.reset_mock()
    mock_redis.keys.return_value = []
    assert cache_manager.delete_pattern("doctor:list:*") == 0
    mock_redis.delete.assert_not_called()


def test_rate_limiter_first_request_opens_window():
    mock_redis = MagicMock()
    mock_redis.get.return_value = None

    assert RateLimiter(mock_redis).check_rate_limit("login:patient:a@b.com", 10, 60) is True
    mock_redis.setex.assert_called_once_with("login:patient:a@b.com", 60, 1)


def test_rate_limiter_counts_within_window():
    mock_redis = MagicMock()
    mock_redis.get.return_value = "3"

    assert RateLimiter(mock_redis).check_rate_limit("login:patient:a@b.com", 10) is True
    mock_redis.incr.assert_called_once_with("login:patient:a@b.com")


def test_rate_limiter_blocks_at_limit():
    mock_redis = MagicMock()
    mock_redis.get.return_value = "10"

    assert RateLimiter(mock_redis).check_rate_limit("login:patient:a@b.com", 10) is False
    mock_redis.incr.assert_not_called()


def test_rate_limiter_fails_open():
    mock_redis = MagicMock()
    mock_redis.get.side_effect = redis.ConnectionError("down")

    assert RateLimiter(mock_redis).check_rate_limit("login:patient:a@b.com", 10) is True


def test_check_redis_connection():
    healthy = MagicMock()
    healthy.ping.return_value = True
    assert check_redis_connection(healthy) is True

    broken = MagicMock()
    broken.ping.side_effect = redis.ConnectionError("down")
    assert check_redis_connection(broken) is False
