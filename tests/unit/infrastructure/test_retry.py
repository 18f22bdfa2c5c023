# nosec B101


import pytest
from unittest.mock import AsyncMock

from domain.exceptions.currency import RateFetchError, RateFetchErrorKind
from infrastructure.retry import RetryPolicy, retry_with_backoff


def _transient(error):
    return isinstance(error, RateFetchError) and error.is_transient


def _network_error():
    return RateFetchError('connection reset', RateFetchErrorKind.NETWORK_ERROR)


def test_default_policy_allows_three_attempts():
    assert RetryPolicy().max_attempts == 3
    assert RetryPolicy(delays_ms=()).max_attempts == 1


@pytest.mark.asyncio
async def test_succeeds_after_transient_failures_with_fixed_backoff(fake_sleep, sleeps):
    operation = AsyncMock(side_effect=[_network_error(), _network_error(), 'ok'])

    result = await retry_with_backoff(operation, RetryPolicy(), _transient, sleep=fake_sleep)

    assert result == 'ok'
    assert operation.await_count == 3
    assert sleeps == [0.2, 0.4]


@pytest.mark.asyncio
async def test_gives_up_after_last_attempt_and_reraises(fake_sleep, sleeps):
    errors = [_network_error(), _network_error(), RateFetchError('slow', RateFetchErrorKind.TIMEOUT)]
    operation = AsyncMock(side_effect=errors)

    with pytest.raises(RateFetchError) as exc_info:
        await retry_with_backoff(operation, RetryPolicy(), _transient, sleep=fake_sleep)

    assert exc_info.value is errors[-1]
    assert operation.await_count == 3
    assert sleeps == [0.2, 0.4]


@pytest.mark.asyncio
async def test_permanent_failure_is_not_retried(fake_sleep, sleeps):
    error = RateFetchError('bad body', RateFetchErrorKind.INVALID_RESPONSE)
    operation = AsyncMock(side_effect=error)

    with pytest.raises(RateFetchError) as exc_info:
        await retry_with_backoff(operation, RetryPolicy(), _transient, sleep=fake_sleep)

    assert exc_info.value is error
    assert operation.await_count == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_custom_schedule(fake_sleep, sleeps):
    operation = AsyncMock(side_effect=[_network_error(), 'ok'])

    result = await retry_with_backoff(operation, RetryPolicy(delays_ms=(50,)), _transient, sleep=fake_sleep)

    assert result == 'ok'
    assert sleeps == [0.05]
