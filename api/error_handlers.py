import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domain.exceptions.currency import (
	RateFetchError,
	RateFetchErrorKind,
	RateLookupError,
	ValidationError,
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(ValidationError)
	async def validation_error_handler(request: Request, exc: ValidationError):
		return JSONResponse(
			status_code=400, content={'detail': exc.user_message, 'code': exc.kind.value}
		)

	@app.exception_handler(RateLookupError)
	async def rate_lookup_handler(request: Request, exc: RateLookupError):
		logger.warning(f'Rate lookup failed: {exc.message}')
		return JSONResponse(status_code=400, content={'detail': exc.message, 'code': exc.kind.value})

	@app.exception_handler(RateFetchError)
	async def rate_fetch_handler(request: Request, exc: RateFetchError):
		logger.error(f'Rate fetch error: {exc.to_dict()}')
		status_code = 429 if exc.kind is RateFetchErrorKind.RATE_LIMIT else 503
		return JSONResponse(
			status_code=status_code, content={'detail': exc.user_message, 'code': exc.kind.value}
		)
