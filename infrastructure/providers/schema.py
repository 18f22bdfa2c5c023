import math
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from domain.clock import HOUR_MS, MINUTE_MS, normalize_epoch_ms
from domain.exceptions.currency import RateFetchError, RateFetchErrorKind
from domain.models.currency import RateSnapshot

MAX_RESPONSE_AGE_MS = 24 * HOUR_MS
MAX_CLOCK_SKEW_MS = 5 * MINUTE_MS


def _is_finite(value: int | float) -> bool:
	# JSON integers past the float range count as infinite
	try:
		return math.isfinite(value)
	except OverflowError:
		return False


class RatesPayload(BaseModel):
	"""Provider response body: ``{base, timestamp, rates}``. Strict, so nothing is coerced."""

	model_config = ConfigDict(strict=True, extra='ignore')

	base: str = Field(min_length=3, max_length=3)
	timestamp: int | float
	rates: dict[str, int | float]

	@field_validator('timestamp')
	@classmethod
	def timestamp_must_be_finite(cls, v: int | float):
		if not _is_finite(v) or v <= 0:
			raise ValueError('timestamp must be a positive finite number')
		return v

	@field_validator('rates')
	@classmethod
	def rates_must_be_finite_and_positive(cls, v: dict[str, int | float]):
		if not v:
			raise ValueError('rates must not be empty')
		for code, rate in v.items():
			if not _is_finite(rate) or rate <= 0:
				raise ValueError(f'rate for {code} must be a finite number > 0, got {rate!r}')
		return v


def _invalid(message: str, **detail: Any) -> RateFetchError:
	return RateFetchError(message, RateFetchErrorKind.INVALID_RESPONSE, detail or None)


def parse_rate_payload(
	data: Any,
	requested_base: str,
	received_at_ms: int,
	max_age_ms: int = MAX_RESPONSE_AGE_MS,
) -> RateSnapshot:
	"""Validate a provider body and turn it into a ``RateSnapshot``.

	Raises ``RateFetchError(INVALID_RESPONSE)`` on any schema violation, when the
	payload is for a different base, or when its timestamp falls outside the
	last ``max_age_ms`` of ``received_at_ms``.
	"""
	try:
		payload = RatesPayload.model_validate(data)
	except ValidationError as e:
		raise _invalid(
			f'Invalid rates response: {e.error_count()} validation errors',
			errors=[f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()],
		) from e

	if payload.base.upper() != requested_base.upper():
		raise _invalid(
			f'Response base {payload.base} does not match requested {requested_base}',
			base=payload.base,
			requested=requested_base,
		)

	fetched_at_ms = normalize_epoch_ms(payload.timestamp)
	age_ms = received_at_ms - fetched_at_ms
	if age_ms >= max_age_ms or age_ms < -MAX_CLOCK_SKEW_MS:
		raise _invalid(
			f'Response timestamp {fetched_at_ms} is outside the accepted window',
			timestamp=fetched_at_ms,
			received_at=received_at_ms,
		)

	return RateSnapshot(
		base_currency=payload.base,
		fetched_at_ms=fetched_at_ms,
		rates={code: Decimal(str(rate)) for code, rate in payload.rates.items()},
	)
