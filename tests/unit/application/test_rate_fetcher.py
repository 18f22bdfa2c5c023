# nosec B101


from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest

from application.services.rate_fetcher import RateFetcher
from domain.exceptions.currency import RateFetchError, RateFetchErrorKind


def _error(kind, status_code=None):
    detail = {'status_code': status_code} if status_code else None
    return RateFetchError(f'{kind.value} failure', kind, detail)


@pytest.fixture
def provider():
    mock_provider = Mock()
    mock_provider.name = 'mock_provider'
    mock_provider.fetch_latest = AsyncMock()
    return mock_provider


@pytest.fixture
def fetcher(provider, clock, fake_sleep):
    return RateFetcher(provider, clock=clock, sleep=fake_sleep)


@pytest.mark.asyncio
async def test_fetch_success_on_first_attempt(fetcher, provider, make_payload, sleeps):
    provider.fetch_latest.return_value = make_payload()

    outcome = await fetcher.fetch('usd')

    assert outcome.ok
    assert outcome.error is None
    assert outcome.attempts == 1
    assert outcome.snapshot.base_currency == 'USD'
    assert outcome.snapshot.rates['EUR'] == Decimal('0.93')
    assert sleeps == []
    provider.fetch_latest.assert_awaited_once_with('USD')


@pytest.mark.asyncio
async def test_transient_failure_then_success(fetcher, provider, make_payload, sleeps):
    provider.fetch_latest.side_effect = [_error(RateFetchErrorKind.NETWORK_ERROR), make_payload()]

    outcome = await fetcher.fetch('USD')

    assert outcome.ok
    assert outcome.attempts == 2
    assert sleeps == [0.2]


@pytest.mark.asyncio
async def test_exhausted_retries_return_last_error(fetcher, provider, sleeps):
    provider.fetch_latest.side_effect = [
        _error(RateFetchErrorKind.TIMEOUT),
        _error(RateFetchErrorKind.API_ERROR, 502),
        _error(RateFetchErrorKind.TIMEOUT),
    ]

    outcome = await fetcher.fetch('USD')

    assert not outcome.ok
    assert outcome.snapshot is None
    assert outcome.error.kind is RateFetchErrorKind.TIMEOUT
    assert outcome.attempts == 3
    assert sleeps == [0.2, 0.4]


@pytest.mark.parametrize(
    'error',
    [
        _error(RateFetchErrorKind.RATE_LIMIT, 429),
        _error(RateFetchErrorKind.API_ERROR, 401),
        _error(RateFetchErrorKind.INVALID_RESPONSE),
    ],
)
@pytest.mark.asyncio
async def test_permanent_failures_are_not_retried(fetcher, provider, sleeps, error):
    provider.fetch_latest.side_effect = error

    outcome = await fetcher.fetch('USD')

    assert outcome.error is error
    assert outcome.attempts == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_invalid_payload_is_not_retried(fetcher, provider, make_payload):
    provider.fetch_latest.return_value = make_payload(rates={'EUR': -1})

    outcome = await fetcher.fetch('USD')

    assert outcome.error.kind is RateFetchErrorKind.INVALID_RESPONSE
    assert outcome.attempts == 1


@pytest.mark.asyncio
async def test_payload_age_is_checked_against_receipt_time(fetcher, provider, make_payload, clock):
    provider.fetch_latest.return_value = make_payload(timestamp=clock.now // 1000 - 25 * 3600)

    outcome = await fetcher.fetch('USD')

    assert outcome.error.kind is RateFetchErrorKind.INVALID_RESPONSE


@pytest.mark.asyncio
async def test_fetch_exchange_rates_raises_on_failure(fetcher, provider):
    provider.fetch_latest.side_effect = _error(RateFetchErrorKind.RATE_LIMIT, 429)

    with pytest.raises(RateFetchError) as exc_info:
        await fetcher.fetch_exchange_rates('USD')

    assert exc_info.value.kind is RateFetchErrorKind.RATE_LIMIT


@pytest.mark.asyncio
async def test_fetch_exchange_rates_returns_snapshot(fetcher, provider, make_payload):
    provider.fetch_latest.return_value = make_payload(base='EUR', rates={'USD': 1.075})

    snapshot = await fetcher.fetch_exchange_rates('eur')

    assert snapshot.base_currency == 'EUR'
    assert snapshot.rates['USD'] == Decimal('1.075')
