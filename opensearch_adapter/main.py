"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from opensearch_adapter import __version__
from opensearch_adapter import obs
from opensearch_adapter.api import ops, recovery
from opensearch_adapter.api.errors import install_error_handlers
from opensearch_adapter.container import AdapterContainer, build_container
from opensearch_adapter.infra.scheduler import AdapterScheduler
from opensearch_adapter.settings import settings

_LOG = logging.getLogger(__name__)

REGISTRATION_JOB_ID = "dbaas-aggregator-registration"


@asynccontextmanager
async def lifespan(app: FastAPI):
	container: AdapterContainer = app.state.container
	scheduler: AdapterScheduler | None = None
	if settings.registration_enabled:
		scheduler = AdapterScheduler()
		scheduler.start()
		scheduler.schedule_interval(
			REGISTRATION_JOB_ID,
			container.registration.register,
			seconds=settings.registration_interval_seconds,
			run_now=True,
		)
		app.state.scheduler = scheduler
	_LOG.info("adapter.started", extra={"registration": settings.registration_enabled})
	try:
		yield
	finally:
		if scheduler is not None:
			scheduler.shutdown()
		await container.aclose()
		_LOG.info("adapter.stopped")


def create_app(container: AdapterContainer | None = None) -> FastAPI:
	app = FastAPI(
		title="DBaaS OpenSearch adapter",
		version=__version__,
		lifespan=lifespan,
		root_path=settings.api_root_path or "",
	)
	app.state.container = container or build_container(settings)
	obs.init(app)
	install_error_handlers(app)
	app.include_router(ops.router)
	app.include_router(recovery.router)
	return app


app = create_app()
