import logging
from decimal import Decimal

from application.services.currency_service import CurrencyService
from application.services.rate_service import RateService
from domain.conversion.arithmetic import convert_amount, is_safe_number, round_to_minor_unit
from domain.conversion.cross_rate import calculate_cross_rate
from domain.conversion.formatting import format_currency
from domain.conversion.validation import validate_amount
from domain.exceptions.currency import ValidationError, ValidationErrorKind
from domain.models.currencies import minor_unit_for
from domain.models.currency import ConversionResult, RateSnapshot, RateSource

logger = logging.getLogger(__name__)


class ConversionService:
	def __init__(self, rate_service: RateService, currency_service: CurrencyService):
		self.rate_service = rate_service
		self.currency_service = currency_service

	def perform_conversion(
		self, amount: Decimal, from_currency: str, to_currency: str, snapshot: RateSnapshot
	) -> ConversionResult:
		"""Convert ``amount`` using ``snapshot``; raises on a bad amount or an unresolvable pair."""
		if not is_safe_number(amount):
			finite = (
				isinstance(amount, (int, float, Decimal))
				and not isinstance(amount, bool)
				and Decimal(str(amount)).is_finite()
			)
			kind = ValidationErrorKind.AMOUNT_TOO_LARGE if finite else ValidationErrorKind.INVALID_AMOUNT
			raise ValidationError(f'Amount {amount!r} is not a safe number', kind)
		amount = Decimal(str(amount)) if isinstance(amount, float) else Decimal(amount)
		if amount <= 0:
			kind = ValidationErrorKind.NEGATIVE_AMOUNT if amount < 0 else ValidationErrorKind.INVALID_AMOUNT
			raise ValidationError(f'Amount must be positive, got {amount}', kind)

		from_code = from_currency.upper()
		to_code = to_currency.upper()

		rate = calculate_cross_rate(from_code, to_code, snapshot.rates, snapshot.base_currency)
		minor_unit = minor_unit_for(to_code)
		converted = round_to_minor_unit(convert_amount(amount, rate), minor_unit)

		return ConversionResult(
			converted_amount=converted,
			rate_applied=rate,
			snapshot_timestamp=snapshot.fetched_at_ms,
			formatted=format_currency(converted, to_code, minor_unit),
			from_currency=from_code,
			to_currency=to_code,
			original_amount=amount,
		)

	def perform_conversion_from_input(
		self, raw: str, from_currency: str, to_currency: str, snapshot: RateSnapshot
	) -> ConversionResult | None:
		validation = validate_amount(raw)
		if not validation.valid:
			return None
		return self.perform_conversion(validation.value, from_currency, to_currency, snapshot)

	async def convert(
		self, amount: str | Decimal, from_currency: str, to_currency: str
	) -> tuple[ConversionResult, RateSource]:
		from_code = self.currency_service.validate_currency(from_currency)
		to_code = self.currency_service.validate_currency(to_currency)

		if isinstance(amount, str):
			validation = validate_amount(amount)
			if not validation.valid:
				raise ValidationError(validation.error, validation.code, {'amount': amount})
			amount = validation.value

		rates = await self.rate_service.get_rates(from_code)
		result = self.perform_conversion(amount, from_code, to_code, rates.data)
		logger.debug(
			f'Converted {result.original_amount} {result.from_currency} -> '
			f'{result.converted_amount} {result.to_currency} ({rates.source.value})'
		)
		return result, rates.source
