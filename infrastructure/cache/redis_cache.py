import logging
from datetime import timedelta
from typing import Protocol

from redis import asyncio as redis
from redis.exceptions import AuthenticationError, NoPermissionError, RedisError, ResponseError
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from domain.exceptions.currency import CacheError, CacheErrorKind

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
	"""Durable string key-value store. Failures surface as ``CacheError``."""

	async def get_item(self, key: str) -> str | None: ...

	async def set_item(self, key: str, value: str, ttl: timedelta | None = None) -> None: ...

	async def remove_item(self, key: str) -> None: ...

	async def keys(self, prefix: str) -> list[str]: ...


class RedisStorage:
	"""``KeyValueStorage`` backed by Redis. Expects a client created with ``decode_responses=True``."""

	def __init__(self, redis_client: redis.Redis):
		self.redis = redis_client

	def _translate(self, error: RedisError, key: str, writing: bool) -> CacheError:
		detail = {'key': key, 'error_type': error.__class__.__name__}
		if isinstance(error, ResponseError) and str(error).startswith('OOM'):
			return CacheError(f'Redis out of memory for {key}', CacheErrorKind.QUOTA_EXCEEDED, detail)
		if isinstance(
			error, (AuthenticationError, NoPermissionError, RedisConnectionError, RedisTimeoutError)
		):
			return CacheError(f'Redis unavailable for {key}: {error}', CacheErrorKind.ACCESS_DENIED, detail)
		kind = CacheErrorKind.WRITE_ERROR if writing else CacheErrorKind.ACCESS_DENIED
		return CacheError(f'Redis error for {key}: {error}', kind, detail)

	async def get_item(self, key: str) -> str | None:
		try:
			return await self.redis.get(key)
		except RedisError as e:
			raise self._translate(e, key, writing=False) from e

	async def set_item(self, key: str, value: str, ttl: timedelta | None = None) -> None:
		try:
			if ttl is None:
				await self.redis.set(key, value)
			else:
				await self.redis.setex(key, ttl, value)
		except RedisError as e:
			raise self._translate(e, key, writing=True) from e

	async def remove_item(self, key: str) -> None:
		try:
			await self.redis.delete(key)
		except RedisError as e:
			raise self._translate(e, key, writing=True) from e

	async def keys(self, prefix: str) -> list[str]:
		try:
			return [key async for key in self.redis.scan_iter(match=f'{prefix}*')]
		except RedisError as e:
			raise self._translate(e, f'{prefix}*', writing=False) from e
