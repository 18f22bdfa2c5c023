# nosec B101


import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from application.services.auto_refresh import AutoRefresher
from domain.exceptions.currency import RateFetchError, RateFetchErrorKind
from domain.models.currency import RatesResult, RateSource


@pytest.fixture
def rate_service(make_snapshot):
    mock_service = Mock()
    mock_service.get_rates = AsyncMock(
        return_value=RatesResult(data=make_snapshot(), source=RateSource.NETWORK)
    )
    return mock_service


async def _settle(rounds=5):
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_refreshes_on_start_and_every_interval(rate_service):
    refresher = AutoRefresher(rate_service, 'usd', interval_seconds=0.01)

    refresher.start()
    await asyncio.sleep(0.05)
    await refresher.stop()

    assert rate_service.get_rates.await_count >= 2
    rate_service.get_rates.assert_awaited_with('USD')
    assert refresher.is_running is False


@pytest.mark.asyncio
async def test_hidden_page_suspends_refresh(rate_service):
    refresher = AutoRefresher(rate_service, 'USD', interval_seconds=0.01)
    refresher.set_visible(False)

    refresher.start()
    await asyncio.sleep(0.03)
    assert rate_service.get_rates.await_count == 0

    refresher.set_visible(True)
    await _settle()
    assert rate_service.get_rates.await_count == 1

    await refresher.stop()


@pytest.mark.asyncio
async def test_regaining_visibility_refreshes_immediately(rate_service):
    refresher = AutoRefresher(rate_service, 'USD', interval_seconds=60)

    refresher.start()
    await _settle()
    assert rate_service.get_rates.await_count == 1

    refresher.set_visible(False)
    refresher.set_visible(True)
    await _settle()
    assert rate_service.get_rates.await_count == 2

    await refresher.stop()


@pytest.mark.asyncio
async def test_fetch_errors_do_not_stop_the_loop(rate_service):
    rate_service.get_rates.side_effect = RateFetchError('offline', RateFetchErrorKind.NETWORK_ERROR)
    refresher = AutoRefresher(rate_service, 'USD', interval_seconds=0.01)

    refresher.start()
    await asyncio.sleep(0.05)
    await refresher.stop()

    assert rate_service.get_rates.await_count >= 2


@pytest.mark.asyncio
async def test_start_is_idempotent_and_stop_without_start_is_safe(rate_service):
    refresher = AutoRefresher(rate_service, 'USD', interval_seconds=60)
    await refresher.stop()

    refresher.start()
    task = refresher._task
    refresher.start()

    assert refresher._task is task
    await refresher.stop()
    assert task.cancelled()


@pytest.mark.asyncio
async def test_stop_propagates_cancellation_of_the_caller(rate_service):
    release = asyncio.Event()

    async def slow_get_rates(base):
        try:
            await asyncio.sleep(60)
        except asyncio.CancelledError:
            await release.wait()
            raise

    rate_service.get_rates.side_effect = slow_get_rates
    refresher = AutoRefresher(rate_service, 'USD', interval_seconds=60)
    refresher.start()
    await _settle()

    stopper = asyncio.create_task(refresher.stop())
    await _settle()
    stopper.cancel()
    await _settle()
    release.set()

    with pytest.raises(asyncio.CancelledError):
        await stopper
    assert stopper.cancelled()
