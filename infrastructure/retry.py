import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from tenacity import (
	AsyncRetrying,
	before_sleep_log,
	retry_if_exception,
	stop_after_attempt,
	wait_chain,
	wait_fixed,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
	"""Fixed backoff schedule: one retry per entry in ``delays_ms``, waiting that long first."""

	delays_ms: Sequence[int] = (200, 400)

	@property
	def max_attempts(self) -> int:
		return len(self.delays_ms) + 1

	def retrying(
		self,
		should_retry: Callable[[BaseException], bool],
		sleep: Sleep = asyncio.sleep,
	) -> AsyncRetrying:
		if self.delays_ms:
			wait = wait_chain(*(wait_fixed(delay / 1000) for delay in self.delays_ms))
		else:
			wait = wait_fixed(0)
		return AsyncRetrying(
			stop=stop_after_attempt(self.max_attempts),
			wait=wait,
			retry=retry_if_exception(should_retry),
			sleep=sleep,
			reraise=True,
			before_sleep=before_sleep_log(logger, logging.WARNING),
		)


async def retry_with_backoff(
	operation: Callable[[], Awaitable[T]],
	policy: RetryPolicy,
	should_retry: Callable[[BaseException], bool],
	sleep: Sleep = asyncio.sleep,
) -> T:
	"""Run ``operation`` under ``policy``; the last failure is re-raised unchanged."""
	async for attempt in policy.retrying(should_retry, sleep=sleep):
		with attempt:
			result = await operation()
	return result
