import asyncio
import logging

from application.services.rate_service import RateService
from domain.exceptions.currency import RateFetchError

logger = logging.getLogger(__name__)


class AutoRefresher:
	"""Background loop that keeps one base currency's rates warm.

	Calls ``RateService.get_rates`` every ``interval_seconds`` while visible.
	While hidden the loop parks; becoming visible again triggers an immediate
	refresh instead of waiting out the rest of the interval.
	"""

	def __init__(self, rate_service: RateService, base: str, interval_seconds: float = 300):
		self.rate_service = rate_service
		self.base = base.upper()
		self.interval_seconds = interval_seconds
		self.is_running = False
		self.cycle_count = 0
		self._visible = asyncio.Event()
		self._visible.set()
		self._wake = asyncio.Event()
		self._task: asyncio.Task | None = None

	@property
	def is_visible(self) -> bool:
		return self._visible.is_set()

	def start(self) -> None:
		if self._task is not None and not self._task.done():
			return
		self.is_running = True
		self._task = asyncio.create_task(self.run(), name=f'auto-refresh-{self.base}')
		logger.info(f'Auto refresh started for {self.base} every {self.interval_seconds}s')

	async def stop(self) -> None:
		self.is_running = False
		task, self._task = self._task, None
		if task is None:
			return
		task.cancel()
		try:
			await task
		except asyncio.CancelledError:
			# Only the loop's own cancellation is expected here
			current = asyncio.current_task()
			if current is not None and current.cancelling():
				raise
		logger.info(f'Auto refresh stopped for {self.base}')

	def set_visible(self, visible: bool) -> None:
		if visible and not self._visible.is_set():
			logger.debug(f'Visible again, refreshing {self.base} now')
			self._visible.set()
			self._wake.set()
		elif not visible:
			self._visible.clear()

	async def refresh_once(self) -> None:
		self.cycle_count += 1
		try:
			result = await self.rate_service.get_rates(self.base)
		except RateFetchError as e:
			logger.warning(f'Auto refresh #{self.cycle_count} for {self.base} failed: {e.kind.value} {e.message}')
		except Exception as e:
			logger.error(f'Auto refresh #{self.cycle_count} for {self.base} crashed: {e}', exc_info=True)
		else:
			logger.debug(f'Auto refresh #{self.cycle_count} for {self.base} served from {result.source.value}')

	async def run(self) -> None:
		while self.is_running:
			await self._visible.wait()
			self._wake.clear()
			await self.refresh_once()

			try:
				async with asyncio.timeout(self.interval_seconds):
					await self._wake.wait()
			except TimeoutError:
				pass
