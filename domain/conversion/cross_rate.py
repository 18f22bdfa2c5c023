from collections.abc import Mapping
from decimal import Decimal, DivisionByZero, InvalidOperation

from domain.exceptions.currency import RateLookupError


def get_rate(currency: str, rates: Mapping[str, Decimal]) -> Decimal:
	"""Return the base-relative rate for ``currency``, rejecting missing or unusable values."""
	code = currency.upper()
	if code not in rates:
		raise RateLookupError(f'Missing rate for {code}', detail={'currency': code})

	raw = rates[code]
	try:
		rate = raw if isinstance(raw, Decimal) else Decimal(str(raw))
	except (InvalidOperation, ValueError) as e:
		raise RateLookupError(f'Invalid rate for {code}: {raw!r}', detail={'currency': code}) from e

	if not rate.is_finite() or rate <= 0:
		raise RateLookupError(f'Invalid rate for {code}: {raw!r}', detail={'currency': code})
	return rate


def calculate_cross_rate(
	from_currency: str,
	to_currency: str,
	rates: Mapping[str, Decimal],
	base_currency: str,
) -> Decimal:
	"""Rate that converts one unit of ``from_currency`` into ``to_currency``.

	Identity is resolved before any lookup, so ``from == to == base`` never
	needs an entry for the base itself.
	"""
	from_code = from_currency.upper()
	to_code = to_currency.upper()
	base_code = base_currency.upper()

	if from_code == to_code:
		return Decimal(1)

	try:
		if from_code == base_code:
			return get_rate(to_code, rates)
		if to_code == base_code:
			return Decimal(1) / get_rate(from_code, rates)
		return get_rate(to_code, rates) / get_rate(from_code, rates)
	except (DivisionByZero, InvalidOperation) as e:
		raise RateLookupError(
			f'Cannot derive {from_code}->{to_code} from {base_code} rates',
			detail={'from_currency': from_code, 'to_currency': to_code},
		) from e
