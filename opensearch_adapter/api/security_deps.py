"""Request dependencies shared by the adapter API routers."""

from __future__ import annotations

import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from opensearch_adapter.container import AdapterContainer
from opensearch_adapter.settings import settings

_basic = HTTPBasic(auto_error=False)


SUPPORTED_API_VERSIONS = ("v1", "v2")


def get_container(request: Request) -> AdapterContainer:
	return request.app.state.container


async def require_adapter_path(api_version: str, db_type: str) -> None:
	if api_version not in SUPPORTED_API_VERSIONS or db_type != settings.db_type:
		raise HTTPException(status.HTTP_404_NOT_FOUND, detail="not_found")


async def require_adapter_auth(credentials: HTTPBasicCredentials | None = Depends(_basic)) -> None:
	"""Accept only the credentials the aggregator was given at registration."""
	if credentials is None:
		raise HTTPException(
			status.HTTP_401_UNAUTHORIZED,
			detail="unauthorized",
			headers={"WWW-Authenticate": "Basic"},
		)
	valid_user = secrets.compare_digest(credentials.username.encode(), settings.adapter_username.encode())
	valid_password = secrets.compare_digest(credentials.password.encode(), settings.adapter_password.encode())
	if not (valid_user and valid_password):
		raise HTTPException(
			status.HTTP_401_UNAUTHORIZED,
			detail="unauthorized",
			headers={"WWW-Authenticate": "Basic"},
		)
