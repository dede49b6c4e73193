"""Operations endpoints providing health checks and metrics."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from opensearch_adapter.api.security_deps import get_container
from opensearch_adapter.container import AdapterContainer
from opensearch_adapter.obs import health

router = APIRouter(prefix="", tags=["ops"])


@router.get("/health")
async def health_report(container: AdapterContainer = Depends(get_container)) -> Dict[str, Any]:
	return await health.report(container)


@router.get("/health/live")
async def health_live() -> dict[str, str]:
	return await health.liveness()


@router.get("/metrics")
async def prometheus_metrics() -> Response:
	payload = generate_latest()
	return Response(content=payload, media_type=CONTENT_TYPE_LATEST)
