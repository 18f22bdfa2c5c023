from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class RatesResponse(BaseModel):
	base_currency: str = Field(..., description='Currency the rates are quoted against')
	timestamp: int = Field(..., description='Snapshot time in epoch milliseconds')
	fetched_at: datetime = Field(..., description='Snapshot time as an ISO datetime')
	rates: dict[str, Decimal] = Field(..., description='Units of each currency per one unit of base')
	source: str = Field(..., description='cache, network or stale')
	is_stale: bool = Field(..., description='True when served from an expired cache entry')
	age: str = Field(..., description='Human readable snapshot age')

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'base_currency': 'USD',
				'timestamp': 1758968400000,
				'fetched_at': '2025-09-27T10:20:00Z',
				'rates': {'EUR': '0.93', 'GBP': '0.79'},
				'source': 'network',
				'is_stale': False,
				'age': 'just now',
			}
		}
	)


class ConversionResponse(BaseModel):
	from_currency: str = Field(..., description='Source currency code')
	to_currency: str = Field(..., description='Target currency code')
	original_amount: Decimal = Field(..., description='Original amount requested')
	converted_amount: Decimal = Field(..., description='Converted amount rounded to the target minor unit')
	exchange_rate: Decimal = Field(..., description='Exchange rate used for conversion')
	formatted: str = Field(..., description='Converted amount with currency symbol')
	timestamp: datetime = Field(..., description='When the rate snapshot was taken')
	source: str = Field(..., description='cache, network or stale')

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'from_currency': 'USD',
				'to_currency': 'EUR',
				'original_amount': '100',
				'converted_amount': '93.00',
				'exchange_rate': '0.93',
				'formatted': '€93.00',
				'timestamp': '2025-09-27T10:30:00Z',
				'source': 'cache',
			}
		}
	)


class ValidationResponse(BaseModel):
	valid: bool
	value: Decimal | None = None
	error: str | None = None
	code: str | None = None


class CurrencyResponse(BaseModel):
	code: str
	name: str
	symbol: str
	minor_unit: int
	flag: str | None = None


class SupportedCurrenciesResponse(BaseModel):
	currencies: list[CurrencyResponse] = Field(description='Currency metadata table')
	popular: list[str] = Field(description='Codes shown first in pickers')
