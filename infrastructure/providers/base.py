from typing import Any, Protocol


class ExchangeRateProvider(Protocol):
	"""Source of raw ``{base, timestamp, rates}`` bodies for a base currency."""

	@property
	def name(self) -> str: ...

	async def fetch_latest(self, base: str) -> dict[str, Any]: ...

	async def close(self) -> None: ...
