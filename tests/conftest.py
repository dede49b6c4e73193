from typing import Callable

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from opensearch_adapter.container import build_container
from opensearch_adapter.main import create_app
from opensearch_adapter.settings import settings

ADAPTER_USER = "dbaas-aggregator"
ADAPTER_PASSWORD = "dbaas-aggregator"


@pytest.fixture(autouse=True)
def force_test_settings(monkeypatch):
	"""Pin adapter credentials and keep periodic registration off during tests."""
	monkeypatch.setattr(settings, "adapter_username", ADAPTER_USER)
	monkeypatch.setattr(settings, "adapter_password", ADAPTER_PASSWORD)
	monkeypatch.setattr(settings, "registration_enabled", False)
	monkeypatch.setattr(settings, "recovery_retry_delay_seconds", 0.0)
	monkeypatch.setattr(settings, "db_type", "opensearch")
	yield


@pytest.fixture
def opensearch_handler() -> dict[str, Callable[[httpx.Request], httpx.Response]]:
	"""Mutable holder so a test can swap the fake cluster behaviour."""
	return {"handler": lambda request: httpx.Response(200, json={"status": "OK"})}


@pytest.fixture
def aggregator_handler() -> dict[str, Callable[[httpx.Request], httpx.Response]]:
	return {"handler": lambda request: httpx.Response(200)}


@pytest_asyncio.fixture
async def container(opensearch_handler, aggregator_handler):
	built = build_container(
		settings,
		opensearch_transport=httpx.MockTransport(lambda request: opensearch_handler["handler"](request)),
		aggregator_transport=httpx.MockTransport(lambda request: aggregator_handler["handler"](request)),
	)
	try:
		yield built
	finally:
		await built.aclose()


@pytest_asyncio.fixture
async def api_client(container):
	app = create_app(container)
	transport = ASGITransport(app=app)
	async with AsyncClient(
		transport=transport,
		base_url="http://testserver",
		auth=(ADAPTER_USER, ADAPTER_PASSWORD),
	) as client:
		yield client
