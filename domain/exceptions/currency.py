from enum import Enum
from typing import Any


class RateFetchErrorKind(str, Enum):
	NETWORK_ERROR = 'NETWORK_ERROR'
	API_ERROR = 'API_ERROR'
	TIMEOUT = 'TIMEOUT'
	INVALID_RESPONSE = 'INVALID_RESPONSE'
	RATE_LIMIT = 'RATE_LIMIT'


class CacheErrorKind(str, Enum):
	QUOTA_EXCEEDED = 'QUOTA_EXCEEDED'
	ACCESS_DENIED = 'ACCESS_DENIED'
	PARSE_ERROR = 'PARSE_ERROR'
	WRITE_ERROR = 'WRITE_ERROR'


class ValidationErrorKind(str, Enum):
	INVALID_AMOUNT = 'INVALID_AMOUNT'
	NEGATIVE_AMOUNT = 'NEGATIVE_AMOUNT'
	AMOUNT_TOO_LARGE = 'AMOUNT_TOO_LARGE'
	INVALID_CURRENCY = 'INVALID_CURRENCY'


USER_MESSAGES: dict[Enum, str] = {
	RateFetchErrorKind.NETWORK_ERROR: (
		'Unable to connect to the exchange rate service. Please check your internet connection.'
	),
	RateFetchErrorKind.TIMEOUT: 'The request took too long. Please try again.',
	RateFetchErrorKind.RATE_LIMIT: 'Too many requests. Please wait a moment and try again.',
	RateFetchErrorKind.INVALID_RESPONSE: 'Received invalid data from the exchange rate service.',
	RateFetchErrorKind.API_ERROR: 'Failed to fetch exchange rates. Please try again.',
	CacheErrorKind.QUOTA_EXCEEDED: 'Local storage is full. Clearing some data may help.',
	CacheErrorKind.ACCESS_DENIED: 'Unable to access local storage.',
	CacheErrorKind.PARSE_ERROR: 'Cached data is corrupted. It will be refreshed.',
	CacheErrorKind.WRITE_ERROR: 'Unable to cache data locally.',
	ValidationErrorKind.INVALID_AMOUNT: 'Please enter a valid amount.',
	ValidationErrorKind.NEGATIVE_AMOUNT: 'Please enter a positive number.',
	ValidationErrorKind.AMOUNT_TOO_LARGE: 'The amount is too large. Please enter a smaller value.',
	ValidationErrorKind.INVALID_CURRENCY: 'Please select a valid currency.',
}


def user_message(kind: Enum) -> str:
	"""Map an error kind to the text shown to end users."""
	return USER_MESSAGES.get(kind, 'Something went wrong. Please try again.')


class CurrencyException(Exception):
	"""Base error carrying a kind tag, a message and a serializable detail dict."""

	def __init__(self, message: str, kind: Enum, detail: dict[str, Any] | None = None):
		super().__init__(message)
		self.message = message
		self.kind = kind
		self.detail = detail or {}

	@property
	def user_message(self) -> str:
		return user_message(self.kind)

	def to_dict(self) -> dict[str, Any]:
		return {'kind': self.kind.value, 'message': self.message, 'detail': self.detail}


class RateFetchError(CurrencyException):
	def __init__(
		self,
		message: str,
		kind: RateFetchErrorKind = RateFetchErrorKind.API_ERROR,
		detail: dict[str, Any] | None = None,
	):
		super().__init__(message, kind, detail)

	@property
	def status_code(self) -> int | None:
		return self.detail.get('status_code')

	@property
	def is_transient(self) -> bool:
		if self.kind in (RateFetchErrorKind.NETWORK_ERROR, RateFetchErrorKind.TIMEOUT):
			return True
		if self.kind is RateFetchErrorKind.API_ERROR:
			return self.status_code is not None and self.status_code >= 500
		return False


class CacheError(CurrencyException):
	def __init__(
		self,
		message: str,
		kind: CacheErrorKind = CacheErrorKind.WRITE_ERROR,
		detail: dict[str, Any] | None = None,
	):
		super().__init__(message, kind, detail)


class ValidationError(CurrencyException):
	def __init__(
		self,
		message: str,
		kind: ValidationErrorKind = ValidationErrorKind.INVALID_AMOUNT,
		detail: dict[str, Any] | None = None,
	):
		super().__init__(message, kind, detail)


class RateLookupError(CurrencyException):
	"""A snapshot cannot produce a usable rate for the requested pair."""

	def __init__(self, message: str, detail: dict[str, Any] | None = None):
		super().__init__(message, ValidationErrorKind.INVALID_CURRENCY, detail)
