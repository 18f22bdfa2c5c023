import asyncio
import logging
from typing import Any

import httpx

from domain.exceptions.currency import RateFetchError, RateFetchErrorKind

logger = logging.getLogger(__name__)


class RatesAPIProvider:
	"""HTTP client for a ``GET {base_url}/latest?base=XXX`` rates endpoint.

	The API key, when configured, goes into ``api_key_header`` if set,
	otherwise into the ``api_key_param`` query parameter.
	"""

	DEFAULT_BASE_URL = 'https://api.exchangerate.host'

	def __init__(
		self,
		base_url: str = DEFAULT_BASE_URL,
		api_key: str = '',
		api_key_header: str = '',
		api_key_param: str = 'access_key',
		endpoint: str = 'latest',
		client: httpx.AsyncClient | None = None,
		timeout_ms: int = 5000,
	):
		self.base_url = base_url.rstrip('/')
		self.api_key = api_key
		self.api_key_header = api_key_header
		self.api_key_param = api_key_param
		self.endpoint = endpoint.strip('/')
		self.timeout_ms = timeout_ms

		headers = {'accept': 'application/json'}
		if api_key and api_key_header:
			headers[api_key_header] = api_key
		self._client = client or httpx.AsyncClient(
			timeout=httpx.Timeout(timeout_ms / 1000),
			headers=headers,
			limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
		)

	@property
	def name(self) -> str:
		return 'rates_api'

	def _build_params(self, base: str) -> dict[str, str]:
		params = {'base': base.upper()}
		if self.api_key and not self.api_key_header and self.api_key_param:
			params[self.api_key_param] = self.api_key
		return params

	def _status_error(self, status_code: int, body: str) -> RateFetchError:
		detail = {'status_code': status_code, 'body': body[:200]}
		if status_code == 429:
			logger.warning(f'{self.name}: rate limited (429)')
			return RateFetchError(
				f'{self.name} rate limit exceeded', RateFetchErrorKind.RATE_LIMIT, detail
			)
		logger.error(f'{self.name}: HTTP error {status_code}: {body[:200]}')
		return RateFetchError(
			f'{self.name} HTTP error {status_code}', RateFetchErrorKind.API_ERROR, detail
		)

	async def fetch_latest(self, base: str) -> dict[str, Any]:
		"""Return the decoded JSON body for ``base``; transport failures raise ``RateFetchError``."""
		url = f'{self.base_url}/{self.endpoint}'
		try:
			async with asyncio.timeout(self.timeout_ms / 1000):
				response = await self._client.get(url, params=self._build_params(base))
			response.raise_for_status()
		except (TimeoutError, httpx.TimeoutException) as e:
			raise RateFetchError(
				f'{self.name} timed out after {self.timeout_ms}ms',
				RateFetchErrorKind.TIMEOUT,
				{'timeout_ms': self.timeout_ms},
			) from e
		except httpx.HTTPStatusError as e:
			raise self._status_error(e.response.status_code, e.response.text) from e
		except httpx.RequestError as e:
			raise RateFetchError(
				f'{self.name} request failed: {e.__class__.__name__}',
				RateFetchErrorKind.NETWORK_ERROR,
				{'error_type': e.__class__.__name__},
			) from e

		try:
			data = response.json()
		except ValueError as e:
			raise RateFetchError(
				f'{self.name} returned a body that is not JSON',
				RateFetchErrorKind.INVALID_RESPONSE,
			) from e

		if isinstance(data, dict) and data.get('success') is False:
			error = data.get('error') or {}
			info = error.get('info') if isinstance(error, dict) else str(error)
			raise RateFetchError(
				f'{self.name} API error: {info or "Unknown error"}',
				RateFetchErrorKind.API_ERROR,
				{'error': error},
			)

		return data

	async def close(self) -> None:
		await self._client.aclose()
