from .auto_refresh import AutoRefresher
from .conversion_service import ConversionService
from .currency_service import CurrencyService
from .rate_fetcher import FetchOutcome, RateFetcher
from .rate_service import RateService

__all__ = [
	'AutoRefresher',
	'ConversionService',
	'CurrencyService',
	'FetchOutcome',
	'RateFetcher',
	'RateService',
]
