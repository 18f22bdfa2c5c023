from .responses import (
	ConversionResponse,
	CurrencyResponse,
	RatesResponse,
	SupportedCurrenciesResponse,
	ValidationResponse,
)

__all__ = [
	'ConversionResponse',
	'CurrencyResponse',
	'RatesResponse',
	'SupportedCurrenciesResponse',
	'ValidationResponse',
]
