import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from functools import partial

from application.services.rate_fetcher import FetchOutcome, RateFetcher
from domain.models.currency import RateSnapshot, RateSource, RatesResult
from infrastructure.cache.rate_cache import RateCache

logger = logging.getLogger(__name__)


@dataclass
class _InFlight:
	task: asyncio.Task
	waiters: int = 0


class RateService:
	"""Single entry point for rate snapshots: fresh cache, then network, then stale cache.

	Concurrent requests for the same base share one network fetch. A caller
	that is cancelled only cancels that fetch when nobody else is waiting on
	it, and a cancelled fetch never reaches the cache.
	"""

	def __init__(self, cache: RateCache, fetcher: RateFetcher):
		self.cache = cache
		self.fetcher = fetcher
		self._inflight: dict[str, _InFlight] = {}

	async def get_rates(self, base: str) -> RatesResult:
		base = base.upper()

		if await self.cache.is_valid(base):
			entry = await self.cache.get(base)
			if entry is not None:
				logger.debug(f'Serving {base} rates from cache')
				return RatesResult(data=entry.snapshot, source=RateSource.CACHE)

		outcome = await self._fetch_shared(base)
		if outcome.ok:
			return RatesResult(data=outcome.snapshot, source=RateSource.NETWORK)

		if await self.cache.is_stale(base):
			entry = await self.cache.get(base)
			if entry is not None:
				logger.warning(
					f'Serving stale {base} rates cached at {entry.cached_at_ms} '
					f'after fetch failure: {outcome.error.kind.value}'
				)
				return RatesResult(data=entry.snapshot, source=RateSource.STALE)

		logger.error(f'No usable {base} rates: {outcome.error.message}')
		raise outcome.error

	async def refresh_rates(self, base: str) -> RateSnapshot:
		base = base.upper()
		outcome = await self._fetch_shared(base)
		if not outcome.ok:
			raise outcome.error
		return outcome.snapshot

	async def preload_rates(self, bases: Iterable[str]) -> None:
		codes = list(dict.fromkeys(base.upper() for base in bases))
		results = await asyncio.gather(*(self.get_rates(code) for code in codes), return_exceptions=True)
		for code, result in zip(codes, results, strict=True):
			if isinstance(result, BaseException):
				logger.warning(f'Preloading {code} rates failed: {result}')

	async def close(self) -> None:
		pending = [inflight.task for inflight in self._inflight.values()]
		self._inflight.clear()
		for task in pending:
			task.cancel()
		await asyncio.gather(*pending, return_exceptions=True)

	async def _fetch_and_store(self, base: str) -> FetchOutcome:
		outcome = await self.fetcher.fetch(base)
		if outcome.ok:
			await self.cache.set(base, outcome.snapshot)
		return outcome

	async def _fetch_shared(self, base: str) -> FetchOutcome:
		inflight = self._inflight.get(base)
		if inflight is None:
			task = asyncio.create_task(self._fetch_and_store(base), name=f'fetch-rates-{base}')
			inflight = _InFlight(task=task)
			self._inflight[base] = inflight
			task.add_done_callback(partial(self._forget, base))
		else:
			logger.debug(f'Joining in-flight {base} fetch')

		inflight.waiters += 1
		try:
			return await asyncio.shield(inflight.task)
		except asyncio.CancelledError:
			if inflight.waiters == 1 and not inflight.task.done():
				logger.info(f'Cancelling {base} fetch, no callers left')
				self._forget(base, inflight.task)
				inflight.task.cancel()
			raise
		finally:
			inflight.waiters -= 1

	def _forget(self, base: str, task: asyncio.Task) -> None:
		current = self._inflight.get(base)
		if current is not None and current.task is task:
			del self._inflight[base]
