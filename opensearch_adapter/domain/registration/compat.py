"""Protocol version negotiation with the DBaaS aggregator."""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any, List

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

_LOG = logging.getLogger(__name__)

API_VERSION_PATH = "/api-version"
_V2_MAJOR = 3


class ProtocolVersion(IntEnum):
	V1 = 1
	V2 = 2

	@property
	def api_prefix(self) -> str:
		return f"v{int(self)}"

	def registration_path(self, db_type: str, physical_database_id: str) -> str:
		# The aggregator exposes physical database registration one major ahead of the adapter contract.
		aggregator_major = int(self) + 1
		return f"/api/v{aggregator_major}/dbaas/{db_type}/physical_databases/{physical_database_id}"


class ApiVersionInfo(BaseModel):
	model_config = ConfigDict(populate_by_name=True, strict=True)

	major: int = 0
	minor: int = 0
	supported_majors: List[int] = Field(default_factory=list, alias="supportedMajors")

	@model_validator(mode="before")
	@classmethod
	def _null_as_zero(cls, data: Any) -> Any:
		# JSON null, for the document or one of its fields, reads as the zero value.
		if data is None:
			return {}
		if isinstance(data, dict):
			return {key: value for key, value in data.items() if value is not None}
		return data

	def protocol(self) -> ProtocolVersion:
		if self.major >= _V2_MAJOR and _V2_MAJOR in self.supported_majors:
			return ProtocolVersion.V2
		return ProtocolVersion.V1


class CompatibilityNegotiator:
	"""Resolves which protocol version the aggregator understands.

	An aggregator that cannot be reached or answers with a non-success status
	is treated as a legacy one (V1). A successful answer whose body does not
	match the expected shape is treated as a modern one (V2).
	"""

	def __init__(self, http: httpx.AsyncClient) -> None:
		self._http = http

	async def resolve_api_version(self, base_url: str) -> ProtocolVersion:
		url = f"{base_url.rstrip('/')}{API_VERSION_PATH}"
		try:
			response = await self._http.get(url)
		except httpx.HTTPError as exc:
			_LOG.warning("compat.api_version_unreachable", extra={"url": url, "error": str(exc)})
			return ProtocolVersion.V1
		if not response.is_success:
			_LOG.info("compat.api_version_unavailable", extra={"url": url, "status": response.status_code})
			return ProtocolVersion.V1
		try:
			info = ApiVersionInfo.model_validate_json(response.content)
		except ValidationError as exc:
			_LOG.warning("compat.api_version_malformed", extra={"url": url, "error": str(exc)})
			return ProtocolVersion.V2
		version = info.protocol()
		_LOG.debug(
			"compat.api_version_resolved",
			extra={"major": info.major, "minor": info.minor, "protocol": version.api_prefix},
		)
		return version


__all__ = ["API_VERSION_PATH", "ApiVersionInfo", "CompatibilityNegotiator", "ProtocolVersion"]
