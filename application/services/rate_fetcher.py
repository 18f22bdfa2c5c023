import asyncio
import logging
from dataclasses import dataclass

from domain.clock import Clock, now_ms
from domain.exceptions.currency import RateFetchError
from domain.models.currency import RateSnapshot
from infrastructure.providers.base import ExchangeRateProvider
from infrastructure.providers.schema import MAX_RESPONSE_AGE_MS, parse_rate_payload
from infrastructure.retry import RetryPolicy, Sleep, retry_with_backoff

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchOutcome:
	"""Result of one fetch, retries included: exactly one of ``snapshot`` / ``error`` is set."""

	snapshot: RateSnapshot | None = None
	error: RateFetchError | None = None
	attempts: int = 0

	@property
	def ok(self) -> bool:
		return self.snapshot is not None


def _is_transient(error: BaseException) -> bool:
	return isinstance(error, RateFetchError) and error.is_transient


class RateFetcher:
	def __init__(
		self,
		provider: ExchangeRateProvider,
		retry_policy: RetryPolicy | None = None,
		clock: Clock = now_ms,
		sleep: Sleep = asyncio.sleep,
		max_age_ms: int = MAX_RESPONSE_AGE_MS,
	):
		self.provider = provider
		self.retry_policy = retry_policy or RetryPolicy()
		self.max_age_ms = max_age_ms
		self._clock = clock
		self._sleep = sleep

	async def _fetch_once(self, base: str) -> RateSnapshot:
		data = await self.provider.fetch_latest(base)
		return parse_rate_payload(data, base, self._clock(), max_age_ms=self.max_age_ms)

	async def fetch(self, base: str) -> FetchOutcome:
		base = base.upper()
		attempts = 0

		async def attempt() -> RateSnapshot:
			nonlocal attempts
			attempts += 1
			return await self._fetch_once(base)

		try:
			snapshot = await retry_with_backoff(
				attempt, self.retry_policy, _is_transient, sleep=self._sleep
			)
		except RateFetchError as e:
			logger.error(
				f'Fetching {base} rates from {self.provider.name} failed after {attempts} '
				f'attempt(s): {e.kind.value} {e.message}'
			)
			return FetchOutcome(error=e, attempts=attempts)

		logger.info(f'Fetched {len(snapshot.rates)} {base} rates in {attempts} attempt(s)')
		return FetchOutcome(snapshot=snapshot, attempts=attempts)

	async def fetch_exchange_rates(self, base: str) -> RateSnapshot:
		outcome = await self.fetch(base)
		if outcome.error is not None:
			raise outcome.error
		return outcome.snapshot
