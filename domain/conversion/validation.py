"""Amount input validation.

``validate_amount`` is on the keystroke path, so it never raises: every
outcome is reported through a ``ValidationResult``.

Separator rules (``.`` and ``,`` can both be decimal separators):

* one separator followed by 1-2 digits is a decimal point;
* one separator followed by exactly 3 digits, after a short non-zero integer
  part, is a grouping separator (``1,234`` and ``1.234`` both mean 1234);
* with several separators the last one is the decimal point and the others
  group (``1,234,56``), unless they are all the same character and the last
  group has three digits, in which case all of them group (``1,234,567``);
* every group after the first must hold exactly three digits.
"""

import re
from decimal import Decimal, InvalidOperation

from domain.conversion.arithmetic import is_safe_number
from domain.exceptions.currency import ValidationErrorKind, user_message
from domain.models.currency import ValidationResult

MAX_INPUT_DIGITS = 15

_WHITESPACE = re.compile(r'\s+')
_NUMERIC = re.compile(r'[0-9.,]+')
_SEPARATOR = re.compile(r'[.,]')


def _invalid(kind: ValidationErrorKind, error: str | None = None) -> ValidationResult:
	return ValidationResult(valid=False, error=error or user_message(kind), code=kind)


def _ungroup(groups: list[str]) -> str | None:
	head, *rest = groups
	if not 1 <= len(head) <= 3:
		return None
	if any(len(group) != 3 for group in rest):
		return None
	return head + ''.join(rest)


def _join(integer: str, fraction: str) -> str | None:
	if not integer and not fraction:
		return None
	if not fraction:
		return integer
	return f'{integer or "0"}.{fraction}'


def _is_grouping(integer: str, fraction: str) -> bool:
	return len(fraction) == 3 and 1 <= len(integer) <= 3 and not integer.startswith('0')


def sanitize_input(text: str) -> str | None:
	"""Normalise ``text`` to a plain ``digits[.digits]`` string, or ``None`` if malformed.

	>>> sanitize_input('1.234,56')
	'1234.56'
	>>> sanitize_input('1,234,567')
	'1234567'
	"""
	compact = _WHITESPACE.sub('', text)
	if not compact or not _NUMERIC.fullmatch(compact):
		return None

	positions = [i for i, ch in enumerate(compact) if ch in '.,']
	if not positions:
		return compact

	if len(positions) == 1:
		integer, fraction = compact[: positions[0]], compact[positions[0] + 1 :]
		if _is_grouping(integer, fraction):
			return integer + fraction
		return _join(integer, fraction)

	last = positions[-1]
	separators = {compact[i] for i in positions}
	if len(separators) == 1:
		groups = compact.split(compact[last])
		if len(groups[-1]) == 3:
			return _ungroup(groups)
		integer = _ungroup(groups[:-1])
		if integer is None:
			return None
		return _join(integer, groups[-1])

	grouping = {compact[i] for i in positions[:-1]}
	if compact[last] in grouping:
		return None
	integer = _ungroup(_SEPARATOR.split(compact[:last]))
	if integer is None:
		return None
	return _join(integer, compact[last + 1 :])


def count_digits_before_decimal(normalized: str) -> int:
	integer = normalized.lstrip('-').split('.', 1)[0]
	return len(integer)


def validate_amount(raw: str | None) -> ValidationResult:
	if raw is None or not raw.strip():
		return _invalid(ValidationErrorKind.INVALID_AMOUNT, 'Please enter an amount.')

	text = raw.strip()
	negative = text.startswith('-')
	if negative:
		text = text[1:]

	normalized = sanitize_input(text)
	if normalized is None:
		return _invalid(ValidationErrorKind.INVALID_AMOUNT)

	if count_digits_before_decimal(normalized) > MAX_INPUT_DIGITS:
		return _invalid(ValidationErrorKind.AMOUNT_TOO_LARGE)

	try:
		value = Decimal(normalized)
	except InvalidOperation:
		return _invalid(ValidationErrorKind.INVALID_AMOUNT)

	if value == 0:
		return _invalid(ValidationErrorKind.INVALID_AMOUNT, 'Please enter an amount greater than zero.')
	if negative:
		return _invalid(ValidationErrorKind.NEGATIVE_AMOUNT)
	if not is_safe_number(value):
		return _invalid(ValidationErrorKind.AMOUNT_TOO_LARGE)

	return ValidationResult(valid=True, value=value)
