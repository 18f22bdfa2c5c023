"""Two-tier rate snapshot cache.

A process-local dict answers first; a ``KeyValueStorage`` (Redis in
production) survives restarts. Durable-tier failures are logged and treated
as misses so they never reach the caller.
"""

import json
import logging
from datetime import timedelta
from decimal import Decimal

from pydantic import BaseModel, ValidationError, field_validator

from domain.clock import HOUR_MS, MINUTE_MS, Clock, now_ms
from domain.exceptions.currency import CacheError, CacheErrorKind
from domain.models.currency import CachedSnapshot, RateSnapshot
from infrastructure.cache.redis_cache import KeyValueStorage

logger = logging.getLogger(__name__)

RATE_CACHE_DURATION_MS = 5 * MINUTE_MS
STALE_CACHE_THRESHOLD_MS = 24 * HOUR_MS
CACHE_NAMESPACE = 'currency_converter_rate_cache'


class _SnapshotRecord(BaseModel):
	base: str
	timestamp: int
	rates: dict[str, Decimal]

	@field_validator('rates')
	@classmethod
	def rates_must_be_positive(cls, v: dict[str, Decimal]):
		for code, rate in v.items():
			if not rate.is_finite() or rate <= 0:
				raise ValueError(f'rate for {code} must be finite and positive')
		return v


class _CachedRecord(BaseModel):
	data: _SnapshotRecord
	cached_at: int
	expires_at: int


def serialize_entry(entry: CachedSnapshot) -> str:
	snapshot = entry.snapshot
	return json.dumps(
		{
			'data': {
				'base': snapshot.base_currency,
				'timestamp': snapshot.fetched_at_ms,
				'rates': {code: str(rate) for code, rate in snapshot.rates.items()},
			},
			'cached_at': entry.cached_at_ms,
			'expires_at': entry.expires_at_ms,
		}
	)


def deserialize_entry(raw: str) -> CachedSnapshot:
	try:
		record = _CachedRecord.model_validate_json(raw)
	except ValidationError as e:
		raise CacheError(
			f'Invalid cached snapshot: {e.error_count()} errors',
			CacheErrorKind.PARSE_ERROR,
			{'errors': [err['msg'] for err in e.errors()]},
		) from e

	return CachedSnapshot(
		snapshot=RateSnapshot(
			base_currency=record.data.base,
			fetched_at_ms=record.data.timestamp,
			rates=record.data.rates,
		),
		cached_at_ms=record.cached_at,
		expires_at_ms=record.expires_at,
	)


class RateCache:
	def __init__(
		self,
		storage: KeyValueStorage | None = None,
		freshness_ms: int = RATE_CACHE_DURATION_MS,
		stale_threshold_ms: int = STALE_CACHE_THRESHOLD_MS,
		namespace: str = CACHE_NAMESPACE,
		clock: Clock = now_ms,
	):
		self.storage = storage
		self.freshness_ms = freshness_ms
		self.stale_threshold_ms = stale_threshold_ms
		self.namespace = namespace
		self._clock = clock
		self._memory: dict[str, CachedSnapshot] = {}

	def _key(self, base: str) -> str:
		return f'{self.namespace}_{base.lower()}'

	async def get(self, base: str) -> CachedSnapshot | None:
		key = self._key(base)
		entry = self._memory.get(key)
		if entry is not None:
			return entry
		if self.storage is None:
			return None

		try:
			raw = await self.storage.get_item(key)
			if raw is None:
				logger.debug(f'Cache miss for {key}')
				return None
			loaded = deserialize_entry(raw)
			if loaded.snapshot.base_currency.lower() != base.lower():
				raise CacheError(
					f'Cached snapshot under {key} is for {loaded.snapshot.base_currency}',
					CacheErrorKind.PARSE_ERROR,
				)
		except CacheError as e:
			logger.warning(f'Durable cache read failed for {key} ({e.kind.value}): {e.message}')
			return None

		# A set() that finished while we were reading wins over the older durable copy
		entry = self._memory.setdefault(key, loaded)
		logger.debug(f'Promoted {key} from durable cache')
		return entry

	async def set(self, base: str, snapshot: RateSnapshot) -> CachedSnapshot:
		key = self._key(base)
		now = self._clock()
		entry = CachedSnapshot(snapshot=snapshot, cached_at_ms=now, expires_at_ms=now + self.freshness_ms)
		self._memory[key] = entry

		if self.storage is not None:
			try:
				await self.storage.set_item(
					key, serialize_entry(entry), ttl=timedelta(milliseconds=self.stale_threshold_ms)
				)
			except CacheError as e:
				logger.warning(f'Durable cache write failed for {key} ({e.kind.value}): {e.message}')

		return entry

	async def is_valid(self, base: str) -> bool:
		entry = await self.get(base)
		if entry is None:
			return False
		return self._clock() < entry.expires_at_ms

	async def is_stale(self, base: str) -> bool:
		entry = await self.get(base)
		if entry is None:
			return False
		age = entry.age_ms(self._clock())
		return self.freshness_ms <= age < self.stale_threshold_ms

	async def clear(self) -> None:
		self._memory.clear()
		if self.storage is None:
			return

		try:
			keys = await self.storage.keys(f'{self.namespace}_')
		except CacheError as e:
			logger.warning(f'Could not list durable cache keys ({e.kind.value}): {e.message}')
			return
		for key in keys:
			await self._remove_durable(key)

	async def clear_currency(self, base: str) -> None:
		key = self._key(base)
		self._memory.pop(key, None)
		if self.storage is not None:
			await self._remove_durable(key)

	async def _remove_durable(self, key: str) -> None:
		try:
			await self.storage.remove_item(key)
		except CacheError as e:
			logger.warning(f'Durable cache removal failed for {key} ({e.kind.value}): {e.message}')
