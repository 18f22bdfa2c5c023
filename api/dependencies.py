import logging

from redis.asyncio import Redis

from application.services import (
	AutoRefresher,
	ConversionService,
	CurrencyService,
	RateFetcher,
	RateService,
)
from config.settings import get_settings
from infrastructure.cache.rate_cache import RateCache
from infrastructure.cache.redis_cache import RedisStorage
from infrastructure.providers import RatesAPIProvider
from infrastructure.retry import RetryPolicy

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	redis_client: Redis | None = None
	rate_cache: RateCache | None = None
	provider: RatesAPIProvider | None = None
	rate_service: RateService | None = None
	conversion_service: ConversionService | None = None
	currency_service: CurrencyService | None = None
	auto_refresher: AutoRefresher | None = None


deps = AppDependencies()


def init_dependencies() -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = get_settings()

	deps.redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
	deps.rate_cache = RateCache(
		storage=RedisStorage(deps.redis_client),
		freshness_ms=settings.RATE_CACHE_DURATION_MS,
		stale_threshold_ms=settings.STALE_CACHE_THRESHOLD_MS,
		namespace=settings.CACHE_NAMESPACE,
	)

	deps.provider = RatesAPIProvider(
		base_url=settings.RATES_API_BASE_URL,
		api_key=settings.RATES_API_KEY,
		api_key_header=settings.RATES_API_KEY_HEADER,
		api_key_param=settings.RATES_API_KEY_PARAM,
		timeout_ms=settings.API_TIMEOUT_MS,
	)
	fetcher = RateFetcher(deps.provider, RetryPolicy(delays_ms=tuple(settings.RETRY_DELAYS_MS)))

	deps.rate_service = RateService(cache=deps.rate_cache, fetcher=fetcher)
	deps.currency_service = CurrencyService()
	deps.conversion_service = ConversionService(
		rate_service=deps.rate_service, currency_service=deps.currency_service
	)

	if settings.AUTO_REFRESH_ENABLED:
		deps.auto_refresher = AutoRefresher(
			deps.rate_service,
			settings.DEFAULT_BASE_CURRENCY,
			interval_seconds=settings.AUTO_REFRESH_INTERVAL_SECONDS,
		)
	logger.info('Dependencies initialized')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.auto_refresher:
		await deps.auto_refresher.stop()
	if deps.rate_service:
		await deps.rate_service.close()
	if deps.provider:
		await deps.provider.close()
	if deps.redis_client:
		await deps.redis_client.aclose()

	logger.info('Cleanup complete')


async def bootstrap() -> None:
	"""Warm the rate cache and start background refresh. Called after init_dependencies()."""
	logger.info('Bootstrapping application...')

	if deps.rate_service is None:
		raise RuntimeError('Dependencies not initialized. Call init_dependencies() first.')

	settings = get_settings()
	await deps.rate_service.preload_rates(settings.PRELOAD_CURRENCIES)

	if deps.auto_refresher:
		deps.auto_refresher.start()

	logger.info('Bootstrap complete')


def get_rate_service() -> RateService:
	if deps.rate_service is None:
		raise RuntimeError('Rate service not initialized')
	return deps.rate_service


def get_currency_service() -> CurrencyService:
	if deps.currency_service is None:
		raise RuntimeError('Currency service not initialized')
	return deps.currency_service


def get_conversion_service() -> ConversionService:
	if deps.conversion_service is None:
		raise RuntimeError('Conversion service not initialized')
	return deps.conversion_service
