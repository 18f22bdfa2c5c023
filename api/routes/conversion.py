from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_conversion_service
from api.schemas import ConversionResponse, ValidationResponse
from application.services import ConversionService
from domain.clock import epoch_ms_to_datetime
from domain.conversion.validation import validate_amount

router = APIRouter(prefix='/api', tags=['conversion'])


@router.get(
	'/convert',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert currency amount',
)
async def convert_currency(
	amount: Annotated[str, Query(min_length=1, max_length=64)],
	from_currency: Annotated[str, Query(min_length=3, max_length=3)],
	to_currency: Annotated[str, Query(min_length=3, max_length=3)],
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> ConversionResponse:
	result, source = await service.convert(amount, from_currency, to_currency)
	return ConversionResponse(
		from_currency=result.from_currency,
		to_currency=result.to_currency,
		original_amount=result.original_amount,
		converted_amount=result.converted_amount,
		exchange_rate=result.rate_applied,
		formatted=result.formatted,
		timestamp=epoch_ms_to_datetime(result.snapshot_timestamp),
		source=source.value,
	)


@router.get(
	'/validate',
	response_model=ValidationResponse,
	status_code=status.HTTP_200_OK,
	summary='Check an amount as typed by a user',
)
async def validate(amount: Annotated[str, Query(max_length=64)] = '') -> ValidationResponse:
	result = validate_amount(amount)
	return ValidationResponse(
		valid=result.valid,
		value=result.value,
		error=result.error,
		code=result.code.value if result.code else None,
	)
