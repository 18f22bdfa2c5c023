from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, status

from api.dependencies import get_currency_service
from api.schemas import CurrencyResponse, SupportedCurrenciesResponse
from application.services import CurrencyService

router = APIRouter(prefix='/api', tags=['currency'])


@router.get(
	'/currencies',
	response_model=SupportedCurrenciesResponse,
	status_code=status.HTTP_200_OK,
	summary='List supported currencies',
)
async def get_supported_currencies(
	service: Annotated[CurrencyService, Depends(get_currency_service)],
) -> SupportedCurrenciesResponse:
	return SupportedCurrenciesResponse(
		currencies=[CurrencyResponse(**asdict(currency)) for currency in service.list_currencies()],
		popular=[currency.code for currency in service.popular_currencies()],
	)
