from types import MappingProxyType

from domain.models.currency import CurrencyMetadata

CURRENCIES: tuple[CurrencyMetadata, ...] = (
	CurrencyMetadata('USD', 'US Dollar', '$', 2, '🇺🇸'),
	CurrencyMetadata('EUR', 'Euro', '€', 2, '🇪🇺'),
	CurrencyMetadata('GBP', 'British Pound', '£', 2, '🇬🇧'),
	CurrencyMetadata('JPY', 'Japanese Yen', '¥', 0, '🇯🇵'),
	CurrencyMetadata('CAD', 'Canadian Dollar', 'CA$', 2, '🇨🇦'),
	CurrencyMetadata('AUD', 'Australian Dollar', 'A$', 2, '🇦🇺'),
	CurrencyMetadata('CHF', 'Swiss Franc', 'CHF', 2, '🇨🇭'),
	CurrencyMetadata('CNY', 'Chinese Yuan', '¥', 2, '🇨🇳'),
	CurrencyMetadata('INR', 'Indian Rupee', '₹', 2, '🇮🇳'),
	CurrencyMetadata('SGD', 'Singapore Dollar', 'S$', 2, '🇸🇬'),
	CurrencyMetadata('NZD', 'New Zealand Dollar', 'NZ$', 2, '🇳🇿'),
	CurrencyMetadata('HKD', 'Hong Kong Dollar', 'HK$', 2, '🇭🇰'),
	CurrencyMetadata('SEK', 'Swedish Krona', 'kr', 2, '🇸🇪'),
	CurrencyMetadata('NOK', 'Norwegian Krone', 'kr', 2, '🇳🇴'),
	CurrencyMetadata('DKK', 'Danish Krone', 'kr', 2, '🇩🇰'),
	CurrencyMetadata('KRW', 'South Korean Won', '₩', 0, '🇰🇷'),
	CurrencyMetadata('MXN', 'Mexican Peso', 'MX$', 2, '🇲🇽'),
	CurrencyMetadata('BRL', 'Brazilian Real', 'R$', 2, '🇧🇷'),
	CurrencyMetadata('ZAR', 'South African Rand', 'R', 2, '🇿🇦'),
	CurrencyMetadata('RUB', 'Russian Ruble', '₽', 2, '🇷🇺'),
	CurrencyMetadata('TRY', 'Turkish Lira', '₺', 2, '🇹🇷'),
	CurrencyMetadata('THB', 'Thai Baht', '฿', 2, '🇹🇭'),
	CurrencyMetadata('IDR', 'Indonesian Rupiah', 'Rp', 2, '🇮🇩'),
	CurrencyMetadata('MYR', 'Malaysian Ringgit', 'RM', 2, '🇲🇾'),
	CurrencyMetadata('PHP', 'Philippine Peso', '₱', 2, '🇵🇭'),
	CurrencyMetadata('PLN', 'Polish Zloty', 'zł', 2, '🇵🇱'),
	CurrencyMetadata('CZK', 'Czech Koruna', 'Kč', 2, '🇨🇿'),
	CurrencyMetadata('ILS', 'Israeli Shekel', '₪', 2, '🇮🇱'),
	CurrencyMetadata('AED', 'UAE Dirham', 'د.إ', 2, '🇦🇪'),
	CurrencyMetadata('SAR', 'Saudi Riyal', '﷼', 2, '🇸🇦'),
)

CURRENCY_MAP: MappingProxyType[str, CurrencyMetadata] = MappingProxyType(
	{currency.code: currency for currency in CURRENCIES}
)

POPULAR_CURRENCIES: tuple[str, ...] = ('USD', 'EUR', 'GBP', 'JPY', 'CAD', 'AUD')

DEFAULT_BASE_CURRENCY = 'USD'
DEFAULT_TARGET_CURRENCY = 'EUR'

DEFAULT_MINOR_UNIT = 2


def get_currency(code: str) -> CurrencyMetadata | None:
	return CURRENCY_MAP.get(code.upper())


def minor_unit_for(code: str) -> int:
	currency = get_currency(code)
	return currency.minor_unit if currency else DEFAULT_MINOR_UNIT
