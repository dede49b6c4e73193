import asyncio

import pytest

from opensearch_adapter.main import REGISTRATION_JOB_ID, create_app
from opensearch_adapter.settings import settings


@pytest.mark.asyncio
async def test_lifespan_registers_on_startup_and_closes_clients(monkeypatch, container):
	monkeypatch.setattr(settings, "registration_enabled", True)
	monkeypatch.setattr(settings, "registration_interval_seconds", 3600.0)
	app = create_app(container)

	async with app.router.lifespan_context(app):
		scheduler = app.state.scheduler
		assert scheduler.running
		assert scheduler._scheduler.get_job(REGISTRATION_JOB_ID) is not None
		for _ in range(100):
			if container.registration.health.status != "UNKNOWN":
				break
			await asyncio.sleep(0.02)

	assert container.registration.health.status == "OK"
	assert not scheduler.running
	assert container.opensearch_http.is_closed
	assert container.aggregator_http.is_closed


@pytest.mark.asyncio
async def test_lifespan_without_registration(container):
	app = create_app(container)

	async with app.router.lifespan_context(app):
		assert not hasattr(app.state, "scheduler")

	assert container.registration.health.status == "UNKNOWN"
