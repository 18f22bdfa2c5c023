from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_conversion_service, get_currency_service, get_rate_service
from api.main import app
from application.services import ConversionService, CurrencyService
from domain.models.currency import RateSnapshot, RatesResult, RateSource

SNAPSHOT_MS = 1_760_000_000_000


@pytest.fixture
def usd_snapshot():
    return RateSnapshot(
        base_currency='USD',
        fetched_at_ms=SNAPSHOT_MS,
        rates={'EUR': Decimal('0.93'), 'GBP': Decimal('0.79'), 'JPY': Decimal('149.5')},
    )


@pytest.fixture
def mock_rate_service(usd_snapshot):
    mock_service = MagicMock()
    mock_service.get_rates = AsyncMock(return_value=RatesResult(data=usd_snapshot, source=RateSource.CACHE))
    mock_service.refresh_rates = AsyncMock(return_value=usd_snapshot)
    return mock_service


@pytest.fixture
def client(mock_rate_service):
    currency_service = CurrencyService()
    conversion_service = ConversionService(rate_service=mock_rate_service, currency_service=currency_service)

    # Override the real dependencies; the lifespan never runs under a bare TestClient
    app.dependency_overrides[get_rate_service] = lambda: mock_rate_service
    app.dependency_overrides[get_currency_service] = lambda: currency_service
    app.dependency_overrides[get_conversion_service] = lambda: conversion_service
    client = TestClient(app, raise_server_exceptions=False)
    yield client
    app.dependency_overrides.clear()
