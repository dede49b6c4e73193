"""Health report combining aggregator registration and recovery state."""

from __future__ import annotations

from typing import Any, Dict

from opensearch_adapter.container import AdapterContainer
from opensearch_adapter.domain.registration.client import STATUS_PROBLEM


async def liveness() -> Dict[str, Any]:
	return {"status": "ok"}


async def report(container: AdapterContainer) -> Dict[str, Any]:
	aggregator = container.registration.health
	status = "PROBLEM" if aggregator.status == STATUS_PROBLEM else "UP"
	payload: Dict[str, Any] = {
		"status": status,
		"dbaasAggregatorHealth": aggregator.to_dict(),
		"recoveryState": container.recovery.get_state().value,
	}
	protocol = container.registration.protocol
	if protocol is not None:
		payload["apiVersion"] = protocol.api_prefix
	return payload
