from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	# Application
	APP_NAME: str = 'Currency Converter API'
	DEBUG: bool = False
	HOST: str = '0.0.0.0'
	PORT: int = 8000
	LOG_LEVEL: str = 'INFO'
	LOG_DIRECTORY: str = ''

	REDIS_URL: str = 'redis://localhost:6379'

	# Rates endpoint
	RATES_API_BASE_URL: str = 'https://api.exchangerate.host'
	RATES_API_KEY: str = ''
	RATES_API_KEY_HEADER: str = ''
	RATES_API_KEY_PARAM: str = 'access_key'
	API_TIMEOUT_MS: int = Field(default=5000, gt=0)
	RETRY_DELAYS_MS: list[int] = [200, 400]

	# Cache
	RATE_CACHE_DURATION_MS: int = Field(default=5 * 60 * 1000, gt=0)
	STALE_CACHE_THRESHOLD_MS: int = Field(default=24 * 60 * 60 * 1000, gt=0)
	CACHE_NAMESPACE: str = 'currency_converter_rate_cache'

	# Conversion
	DEFAULT_BASE_CURRENCY: str = 'USD'
	PRELOAD_CURRENCIES: list[str] = ['USD', 'EUR', 'GBP']

	AUTO_REFRESH_ENABLED: bool = False
	AUTO_REFRESH_INTERVAL_SECONDS: int = Field(default=300, gt=0)

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
