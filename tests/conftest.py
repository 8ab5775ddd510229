from __future__ import annotations

from datetime import date

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from payment_instructions.api.deps import get_payment_service
from payment_instructions.config import Settings, get_settings
from payment_instructions.main import create_app
from payment_instructions.payments.service import PaymentInstructionService
from payment_instructions.schemas.instruction import Account

TODAY = date(2026, 1, 15)


@pytest.fixture(autouse=True)
def _settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set deterministic test env and reset cached Settings."""

    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("API_V1_PREFIX", "/api/v1")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fixed_clock():
    return lambda: TODAY


@pytest.fixture
def service(fixed_clock) -> PaymentInstructionService:
    return PaymentInstructionService.with_clock(fixed_clock)


@pytest.fixture
def usd_accounts() -> list[Account]:
    return [
        Account(account_id="a", balance=230, currency="USD"),
        Account(account_id="b", balance=300, currency="USD"),
    ]


@pytest.fixture
def api_app(service: PaymentInstructionService) -> FastAPI:
    """Build API app with a service pinned to the test clock."""

    app = create_app(Settings())
    app.dependency_overrides[get_payment_service] = lambda: service
    return app


@pytest_asyncio.fixture
async def api_client(api_app: FastAPI) -> httpx.AsyncClient:
    """ASGI client for API integration tests."""

    transport = httpx.ASGITransport(app=api_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
