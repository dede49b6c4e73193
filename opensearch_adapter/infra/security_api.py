"""Client for the OpenSearch security plugin REST API."""

from __future__ import annotations

import json
import logging
from typing import Protocol, Sequence

import httpx

from opensearch_adapter.domain.recovery.models import Change
from opensearch_adapter.errors import SecurityApiError

_LOG = logging.getLogger(__name__)

INTERNAL_USERS_PATH = "/_plugins/_security/api/internalusers"


class SecurityApiClient(Protocol):
	"""Capability used by users recovery to apply bulk user changes."""

	async def patch_users(self, changes: Sequence[Change]) -> None:
		...


class HttpSecurityApiClient:
	"""Applies JSON Patch operations to the internal users resource over HTTP."""

	def __init__(self, http: httpx.AsyncClient) -> None:
		self._http = http

	async def patch_users(self, changes: Sequence[Change]) -> None:
		body = json.dumps([change.to_dict() for change in changes])
		response = await self._http.patch(
			INTERNAL_USERS_PATH,
			content=body,
			headers={"Content-Type": "application/json"},
		)
		if response.is_success:
			_LOG.debug("security_api.patch_users", extra={"count": len(changes)})
			return
		raise SecurityApiError(response.status_code, response.text)


def build_http_client(
	base_url: str,
	*,
	username: str,
	password: str,
	timeout: float,
	verify: bool = True,
	transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
	return httpx.AsyncClient(
		base_url=base_url,
		auth=httpx.BasicAuth(username, password),
		timeout=timeout,
		verify=verify,
		transport=transport,
	)


__all__ = ["HttpSecurityApiClient", "INTERNAL_USERS_PATH", "SecurityApiClient", "build_http_client"]
