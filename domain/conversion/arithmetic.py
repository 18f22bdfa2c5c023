"""Decimal-safe conversion arithmetic.

All money math runs on ``Decimal``. Conversions are computed at a fixed
internal precision first and only then rounded to the target currency's minor
unit, always with banker's rounding (``ROUND_HALF_EVEN``).
"""

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

DECIMAL_PRECISION = 6

# Largest integer a double represents exactly (2**53 - 1)
MAX_SAFE_INTEGER = Decimal(9007199254740991)


def _to_decimal(value: Decimal | int | float | str) -> Decimal:
	if isinstance(value, Decimal):
		return value
	if isinstance(value, float):
		return Decimal(str(value))
	return Decimal(value)


def _quantum(decimals: int) -> Decimal:
	return Decimal(1).scaleb(-decimals)


def round_to_decimals(value: Decimal | int | float | str, decimals: int) -> Decimal:
	"""Round ``value`` to ``decimals`` places, ties to the nearest even digit.

	>>> round_to_decimals(Decimal('2.5'), 0)
	Decimal('2')
	>>> round_to_decimals(Decimal('3.5'), 0)
	Decimal('4')
	"""
	if decimals < 0:
		raise ValueError(f'decimals must be non-negative, got {decimals}')
	return _to_decimal(value).quantize(_quantum(decimals), rounding=ROUND_HALF_EVEN)


def round_to_minor_unit(value: Decimal | int | float | str, minor_unit: int) -> Decimal:
	return round_to_decimals(value, minor_unit)


def convert_amount(
	amount: Decimal | int | float | str,
	rate: Decimal | int | float | str,
	precision: int = DECIMAL_PRECISION,
) -> Decimal:
	"""Multiply ``amount`` by ``rate`` and hold the product at ``precision`` places."""
	return round_to_decimals(_to_decimal(amount) * _to_decimal(rate), precision)


def is_safe_number(value: Decimal | int | float | str | None) -> bool:
	if value is None or isinstance(value, bool):
		return False
	try:
		number = _to_decimal(value)
	except (InvalidOperation, ValueError, TypeError):
		return False
	return number.is_finite() and abs(number) <= MAX_SAFE_INTEGER
