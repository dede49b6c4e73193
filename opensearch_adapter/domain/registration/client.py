"""Registration of this adapter as a physical database in the DBaaS aggregator."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import httpx

from opensearch_adapter.domain.registration.compat import CompatibilityNegotiator, ProtocolVersion
from opensearch_adapter.obs import metrics
from opensearch_adapter.settings import Settings

_LOG = logging.getLogger(__name__)

STATUS_OK = "OK"
STATUS_PROBLEM = "PROBLEM"
STATUS_UNKNOWN = "UNKNOWN"

SUPPORTED_ROLES = ("admin", "dml", "readonly", "ism")


@dataclass(frozen=True)
class ComponentHealth:
	status: str = STATUS_UNKNOWN

	def to_dict(self) -> dict[str, str]:
		return {"status": self.status}


@dataclass(frozen=True)
class RegistrationConfig:
	aggregator_url: str
	aggregator_username: str
	aggregator_password: str
	adapter_address: str
	adapter_username: str
	adapter_password: str
	physical_database_id: str
	db_type: str = "opensearch"
	labels: Mapping[str, str] = field(default_factory=dict)
	request_timeout: float = 5.0

	@classmethod
	def from_settings(cls, settings: Settings) -> RegistrationConfig:
		return cls(
			aggregator_url=settings.aggregator_url,
			aggregator_username=settings.aggregator_username,
			aggregator_password=settings.aggregator_password,
			adapter_address=settings.adapter_address,
			adapter_username=settings.adapter_username,
			adapter_password=settings.adapter_password,
			physical_database_id=settings.physical_database_identifier,
			db_type=settings.db_type,
			labels=dict(settings.adapter_labels),
			request_timeout=settings.registration_request_timeout_seconds,
		)


def build_registration_payload(config: RegistrationConfig, version: ProtocolVersion) -> dict[str, Any]:
	supported_majors = [int(candidate) for candidate in ProtocolVersion if candidate <= version]
	payload: dict[str, Any] = {
		"adapterAddress": config.adapter_address,
		"httpBasicCredentials": {
			"username": config.adapter_username,
			"password": config.adapter_password,
		},
		"supportedRoles": list(SUPPORTED_ROLES),
		"labels": dict(config.labels),
		"metadata": {
			"apiVersion": version.api_prefix,
			"apiVersions": {
				"specs": [
					{
						"specRootUrl": "/api",
						"major": int(version),
						"minor": 0,
						"supportedMajors": supported_majors,
					}
				]
			},
			"supportedRoles": list(SUPPORTED_ROLES),
			"features": {"multiusers": True},
		},
	}
	if version is ProtocolVersion.V2:
		payload["status"] = "run"
	return payload


class RegistrationClient:
	"""Announces the adapter to the aggregator and keeps the last verdict.

	:meth:`register` performs a single attempt; periodic re-registration is
	driven from outside (see ``infra.scheduler``).
	"""

	def __init__(
		self,
		http: httpx.AsyncClient,
		config: RegistrationConfig,
		*,
		negotiator: CompatibilityNegotiator | None = None,
	) -> None:
		self._http = http
		self.config = config
		self._negotiator = negotiator or CompatibilityNegotiator(http)
		self._lock = asyncio.Lock()
		self.health = ComponentHealth()
		self.protocol: Optional[ProtocolVersion] = None

	async def register(self) -> ComponentHealth:
		async with self._lock:
			version = await self._negotiator.resolve_api_version(self.config.aggregator_url)
			self.protocol = version
			metrics.set_protocol_version(int(version))
			health = await self._send(version)
			self.health = health
			metrics.inc_registration(health.status)
			return health

	async def _send(self, version: ProtocolVersion) -> ComponentHealth:
		config = self.config
		url = config.aggregator_url + version.registration_path(config.db_type, config.physical_database_id)
		try:
			response = await self._http.post(
				url,
				json=build_registration_payload(config, version),
				auth=httpx.BasicAuth(config.aggregator_username, config.aggregator_password),
				timeout=config.request_timeout,
			)
		except httpx.HTTPError as exc:
			_LOG.warning("registration.transport_error", extra={"url": url, "error": str(exc)})
			return ComponentHealth(STATUS_PROBLEM)
		if response.is_success:
			_LOG.info("registration.ok", extra={"status": response.status_code, "protocol": version.api_prefix})
			return ComponentHealth(STATUS_OK)
		_LOG.warning(
			"registration.rejected",
			extra={"url": url, "status": response.status_code, "detail": response.text[:256]},
		)
		return ComponentHealth(STATUS_PROBLEM)


__all__ = [
	"ComponentHealth",
	"RegistrationClient",
	"RegistrationConfig",
	"STATUS_OK",
	"STATUS_PROBLEM",
	"STATUS_UNKNOWN",
	"build_registration_payload",
]
