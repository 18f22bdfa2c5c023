from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType

from domain.exceptions.currency import ValidationErrorKind


@dataclass(frozen=True)
class CurrencyMetadata:
	code: str
	name: str
	symbol: str
	minor_unit: int
	flag: str | None = None


@dataclass(frozen=True)
class RateSnapshot:
	"""Rates relative to ``base_currency``: units of each currency per one unit of base."""

	base_currency: str
	fetched_at_ms: int
	rates: Mapping[str, Decimal] = field(default_factory=dict)

	def __post_init__(self):
		object.__setattr__(self, 'base_currency', self.base_currency.upper())
		object.__setattr__(
			self, 'rates', MappingProxyType({code.upper(): rate for code, rate in self.rates.items()})
		)


@dataclass(frozen=True)
class CachedSnapshot:
	snapshot: RateSnapshot
	cached_at_ms: int
	expires_at_ms: int

	def age_ms(self, now_ms: int) -> int:
		return now_ms - self.cached_at_ms


class RateSource(str, Enum):
	CACHE = 'cache'
	NETWORK = 'network'
	STALE = 'stale'

	@property
	def is_degraded(self) -> bool:
		return self is RateSource.STALE


@dataclass(frozen=True)
class RatesResult:
	data: RateSnapshot
	source: RateSource


@dataclass(frozen=True)
class ConversionResult:
	converted_amount: Decimal
	rate_applied: Decimal
	snapshot_timestamp: int
	formatted: str
	from_currency: str
	to_currency: str
	original_amount: Decimal


@dataclass(frozen=True)
class ValidationResult:
	valid: bool
	value: Decimal | None = None
	error: str | None = None
	code: ValidationErrorKind | None = None
