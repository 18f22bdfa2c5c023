# nosec B101


import pytest
from datetime import timedelta
from unittest.mock import AsyncMock, Mock

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import AuthenticationError, ResponseError

from infrastructure.cache.redis_cache import RedisStorage
from domain.exceptions.currency import CacheError, CacheErrorKind


def _async_iter(items):
    async def _gen(*args, **kwargs):
        for item in items:
            yield item
    return _gen


@pytest.mark.asyncio
async def test_get_item_returns_stored_string():
    mock_redis = AsyncMock()
    mock_redis.get.return_value = '{"data": {}}'

    storage = RedisStorage(redis_client=mock_redis)
    result = await storage.get_item('currency_converter_rate_cache_usd')

    assert result == '{"data": {}}'
    mock_redis.get.assert_called_once_with('currency_converter_rate_cache_usd')


@pytest.mark.asyncio
async def test_get_item_miss_returns_none():
    mock_redis = AsyncMock()
    mock_redis.get.return_value = None

    storage = RedisStorage(redis_client=mock_redis)

    assert await storage.get_item('missing') is None


@pytest.mark.asyncio
async def test_set_item_with_ttl_uses_setex():
    mock_redis = AsyncMock()
    storage = RedisStorage(redis_client=mock_redis)

    await storage.set_item('key', 'value', ttl=timedelta(hours=24))

    mock_redis.setex.assert_called_once_with('key', timedelta(hours=24), 'value')
    mock_redis.set.assert_not_called()


@pytest.mark.asyncio
async def test_set_item_without_ttl_uses_set():
    mock_redis = AsyncMock()
    storage = RedisStorage(redis_client=mock_redis)

    await storage.set_item('key', 'value')

    mock_redis.set.assert_called_once_with('key', 'value')


@pytest.mark.asyncio
async def test_remove_item_deletes_key():
    mock_redis = AsyncMock()
    storage = RedisStorage(redis_client=mock_redis)

    await storage.remove_item('key')

    mock_redis.delete.assert_called_once_with('key')


@pytest.mark.asyncio
async def test_keys_scans_by_prefix():
    mock_redis = AsyncMock()
    mock_redis.scan_iter = Mock(side_effect=_async_iter(['ns_usd', 'ns_eur']))
    storage = RedisStorage(redis_client=mock_redis)

    keys = await storage.keys('ns_')

    assert keys == ['ns_usd', 'ns_eur']
    mock_redis.scan_iter.assert_called_once_with(match='ns_*')


# ====================================================================
# Error translation
# ====================================================================

@pytest.mark.asyncio
async def test_out_of_memory_maps_to_quota_exceeded():
    mock_redis = AsyncMock()
    mock_redis.setex.side_effect = ResponseError("OOM command not allowed when used memory > 'maxmemory'")
    storage = RedisStorage(redis_client=mock_redis)

    with pytest.raises(CacheError) as exc_info:
        await storage.set_item('key', 'value', ttl=timedelta(minutes=5))

    assert exc_info.value.kind is CacheErrorKind.QUOTA_EXCEEDED
    assert exc_info.value.detail['key'] == 'key'


@pytest.mark.asyncio
async def test_connection_failure_maps_to_access_denied():
    mock_redis = AsyncMock()
    mock_redis.get.side_effect = RedisConnectionError('Connection refused')
    storage = RedisStorage(redis_client=mock_redis)

    with pytest.raises(CacheError) as exc_info:
        await storage.get_item('key')

    assert exc_info.value.kind is CacheErrorKind.ACCESS_DENIED


@pytest.mark.asyncio
async def test_auth_failure_maps_to_access_denied():
    mock_redis = AsyncMock()
    mock_redis.delete.side_effect = AuthenticationError('invalid password')
    storage = RedisStorage(redis_client=mock_redis)

    with pytest.raises(CacheError) as exc_info:
        await storage.remove_item('key')

    assert exc_info.value.kind is CacheErrorKind.ACCESS_DENIED


@pytest.mark.asyncio
async def test_other_write_errors_map_to_write_error():
    mock_redis = AsyncMock()
    mock_redis.set.side_effect = ResponseError('WRONGTYPE Operation against a key holding the wrong kind of value')
    storage = RedisStorage(redis_client=mock_redis)

    with pytest.raises(CacheError) as exc_info:
        await storage.set_item('key', 'value')

    assert exc_info.value.kind is CacheErrorKind.WRITE_ERROR
