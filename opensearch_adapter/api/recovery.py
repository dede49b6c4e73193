"""Users recovery endpoints called by the DBaaS aggregator."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse, Response
from pydantic import ValidationError

from opensearch_adapter.api.security_deps import get_container, require_adapter_auth, require_adapter_path
from opensearch_adapter.container import AdapterContainer
from opensearch_adapter.domain.recovery import RecoveryRequest

_LOG = logging.getLogger(__name__)

router = APIRouter(
	prefix="/api/{api_version}/dbaas/adapter/{db_type}",
	tags=["recovery"],
	dependencies=[Depends(require_adapter_auth), Depends(require_adapter_path)],
)


@router.post("/users/restore-password")
async def restore_users(request: Request, container: AdapterContainer = Depends(get_container)) -> Response:
	raw = await request.body()
	try:
		payload = RecoveryRequest.model_validate_json(raw)
	except ValidationError as exc:
		_LOG.error("recovery.decode_failed", extra={"error": str(exc)})
		return PlainTextResponse(str(exc), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
	await container.recovery.trigger(payload)
	return Response(status_code=status.HTTP_200_OK)


@router.get("/users/restore-password/state", response_class=PlainTextResponse)
async def restore_users_state(container: AdapterContainer = Depends(get_container)) -> PlainTextResponse:
	return PlainTextResponse(container.recovery.get_state().value)
