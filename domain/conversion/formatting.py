import re
from decimal import Decimal, InvalidOperation

from domain.conversion.arithmetic import round_to_decimals
from domain.conversion.validation import sanitize_input
from domain.models.currencies import DEFAULT_MINOR_UNIT, get_currency

_SYMBOLS_AND_LETTERS = re.compile(r'[^0-9.,\s-]')


def _fixed(value: Decimal, decimals: int, grouping: bool = True) -> str:
	# 'f' presentation never falls back to scientific notation
	rounded = round_to_decimals(value, decimals)
	if rounded.is_zero():
		rounded = abs(rounded)
	spec = f',.{decimals}f' if grouping else f'.{decimals}f'
	return format(rounded, spec)


def format_currency(amount: Decimal, currency_code: str, minor_unit: int | None = None) -> str:
	"""Format ``amount`` with the currency symbol and its minor-unit digit count.

	>>> format_currency(Decimal('1234.56'), 'USD')
	'$1,234.56'
	>>> format_currency(Decimal('1234.56'), 'JPY')
	'¥1,235'
	"""
	currency = get_currency(currency_code)
	if currency is None:
		return _fixed(Decimal(amount), DEFAULT_MINOR_UNIT if minor_unit is None else minor_unit)

	decimals = currency.minor_unit if minor_unit is None else minor_unit
	return f'{currency.symbol}{_fixed(Decimal(amount), decimals)}'


def format_rate(rate: Decimal, decimals: int = 4) -> str:
	return _fixed(Decimal(rate), decimals, grouping=False)


def format_number(value: Decimal, decimals: int = 2) -> str:
	return _fixed(Decimal(value), decimals)


def parse_currency_input(text: str) -> Decimal | None:
	"""Lenient parse for pasted values such as ``'$1,234.56'`` or ``'100 EUR'``."""
	cleaned = _SYMBOLS_AND_LETTERS.sub('', text).strip()
	negative = cleaned.startswith('-')
	normalized = sanitize_input(cleaned.lstrip('-'))
	if normalized is None:
		return None
	try:
		value = Decimal(normalized)
	except InvalidOperation:
		return None
	return -value if negative else value


def relative_time(timestamp_ms: int, now_ms: int) -> str:
	seconds = max(0, (now_ms - timestamp_ms) // 1000)
	if seconds < 60:
		return 'just now'

	if seconds < 3600:
		count, unit = seconds // 60, 'minute'
	elif seconds < 86400:
		count, unit = seconds // 3600, 'hour'
	else:
		count, unit = seconds // 86400, 'day'
	return f'{count} {unit}{"s" if count != 1 else ""} ago'
