import logging

from domain.exceptions.currency import ValidationError, ValidationErrorKind
from domain.models.currencies import CURRENCIES, POPULAR_CURRENCIES, get_currency
from domain.models.currency import CurrencyMetadata

logger = logging.getLogger(__name__)


class CurrencyService:
	"""Read-only access to the static currency table."""

	def get_currency(self, code: str) -> CurrencyMetadata | None:
		return get_currency(code)

	def list_currencies(self) -> list[CurrencyMetadata]:
		return list(CURRENCIES)

	def popular_currencies(self) -> list[CurrencyMetadata]:
		return [get_currency(code) for code in POPULAR_CURRENCIES]

	def get_supported_codes(self) -> list[str]:
		return [currency.code for currency in CURRENCIES]

	def validate_currency(self, code: str) -> str:
		normalized = (code or '').strip().upper()
		if len(normalized) != 3 or not normalized.isascii() or not normalized.isalpha():
			logger.debug(f'Rejected currency code {code!r}')
			raise ValidationError(
				f'Currency {code!r} is not a valid 3-letter code',
				ValidationErrorKind.INVALID_CURRENCY,
				{'currency': code},
			)
		return normalized
