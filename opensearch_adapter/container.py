"""Service container shared by the API layer and the app lifespan."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from opensearch_adapter.domain.recovery import RecoveryEngine, RetryPolicy
from opensearch_adapter.domain.registration import RegistrationClient, RegistrationConfig
from opensearch_adapter.infra.security_api import HttpSecurityApiClient, build_http_client
from opensearch_adapter.settings import Settings


@dataclass
class AdapterContainer:
	opensearch_http: httpx.AsyncClient
	aggregator_http: httpx.AsyncClient
	recovery: RecoveryEngine
	registration: RegistrationClient

	async def aclose(self) -> None:
		await self.recovery.shutdown()
		await self.opensearch_http.aclose()
		await self.aggregator_http.aclose()


def build_container(
	settings: Settings,
	*,
	opensearch_transport: httpx.AsyncBaseTransport | None = None,
	aggregator_transport: httpx.AsyncBaseTransport | None = None,
) -> AdapterContainer:
	opensearch_http = build_http_client(
		settings.opensearch_url,
		username=settings.opensearch_username,
		password=settings.opensearch_password,
		timeout=settings.opensearch_request_timeout_seconds,
		verify=settings.opensearch_verify_certs,
		transport=opensearch_transport,
	)
	aggregator_http = httpx.AsyncClient(
		timeout=settings.registration_request_timeout_seconds,
		transport=aggregator_transport,
	)
	recovery = RecoveryEngine(
		HttpSecurityApiClient(opensearch_http),
		policy=RetryPolicy(
			max_attempts=settings.recovery_max_attempts,
			delay_seconds=settings.recovery_retry_delay_seconds,
		),
		batch_size=settings.recovery_batch_size,
		backend_roles=settings.role_backend_roles,
		call_timeout=settings.opensearch_request_timeout_seconds,
	)
	registration = RegistrationClient(aggregator_http, RegistrationConfig.from_settings(settings))
	return AdapterContainer(
		opensearch_http=opensearch_http,
		aggregator_http=aggregator_http,
		recovery=recovery,
		registration=registration,
	)


__all__ = ["AdapterContainer", "build_container"]
