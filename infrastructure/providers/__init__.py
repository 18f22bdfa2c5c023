from .base import ExchangeRateProvider
from .rates_api import RatesAPIProvider
from .schema import RatesPayload, parse_rate_payload

__all__ = ['ExchangeRateProvider', 'RatesAPIProvider', 'RatesPayload', 'parse_rate_payload']
