from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status

from api.dependencies import get_currency_service, get_rate_service
from api.schemas import RatesResponse
from application.services import CurrencyService, RateService
from domain.clock import epoch_ms_to_datetime, now_ms
from domain.conversion.formatting import relative_time
from domain.models.currencies import DEFAULT_BASE_CURRENCY
from domain.models.currency import RateSnapshot, RateSource

router = APIRouter(prefix='/api', tags=['rates'])

FRESH_CACHE_CONTROL = 'public, s-maxage=300, stale-while-revalidate=60'


def _rates_response(snapshot: RateSnapshot, source: RateSource) -> RatesResponse:
	return RatesResponse(
		base_currency=snapshot.base_currency,
		timestamp=snapshot.fetched_at_ms,
		fetched_at=epoch_ms_to_datetime(snapshot.fetched_at_ms),
		rates=dict(snapshot.rates),
		source=source.value,
		is_stale=source.is_degraded,
		age=relative_time(snapshot.fetched_at_ms, now_ms()),
	)


@router.get(
	'/rates',
	response_model=RatesResponse,
	status_code=status.HTTP_200_OK,
	summary='Get exchange rates for a base currency',
)
async def get_rates(
	response: Response,
	rate_service: Annotated[RateService, Depends(get_rate_service)],
	currency_service: Annotated[CurrencyService, Depends(get_currency_service)],
	base: Annotated[str, Query(min_length=3, max_length=3)] = DEFAULT_BASE_CURRENCY,
) -> RatesResponse:
	base = currency_service.validate_currency(base)
	result = await rate_service.get_rates(base)

	response.headers['Cache-Control'] = 'no-cache' if result.source.is_degraded else FRESH_CACHE_CONTROL
	return _rates_response(result.data, result.source)


@router.post(
	'/rates/{base}/refresh',
	response_model=RatesResponse,
	status_code=status.HTTP_200_OK,
	summary='Force a network fetch, never falling back to cached data',
)
async def refresh_rates(
	base: Annotated[str, Path(min_length=3, max_length=3)],
	response: Response,
	rate_service: Annotated[RateService, Depends(get_rate_service)],
	currency_service: Annotated[CurrencyService, Depends(get_currency_service)],
) -> RatesResponse:
	base = currency_service.validate_currency(base)
	snapshot = await rate_service.refresh_rates(base)

	response.headers['Cache-Control'] = 'no-store'
	return _rates_response(snapshot, RateSource.NETWORK)
