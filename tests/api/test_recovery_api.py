import json

import httpx
import pytest
from httpx import AsyncClient

RESTORE_PATH = "/api/v2/dbaas/adapter/opensearch/users/restore-password"
STATE_PATH = RESTORE_PATH + "/state"


def _body(count: int) -> dict:
	return {
		"settings": {},
		"connectionProperties": [
			{"username": f"user-{idx}", "password": f"pw-{idx}", "dbName": f"db-{idx}"}
			for idx in range(count)
		],
	}


@pytest.mark.asyncio
async def test_state_is_idle_before_any_recovery(api_client: AsyncClient):
	response = await api_client.get(STATE_PATH)

	assert response.status_code == 200
	assert response.text == "idle"


@pytest.mark.asyncio
async def test_restore_accepts_request_and_recovers_users(api_client: AsyncClient, container, opensearch_handler):
	patched: list[list[dict]] = []

	def handler(request: httpx.Request) -> httpx.Response:
		patched.append(json.loads(request.content))
		return httpx.Response(200, json={"status": "OK"})

	opensearch_handler["handler"] = handler

	response = await api_client.post(RESTORE_PATH, json=_body(120))

	assert response.status_code == 200
	assert response.content == b""
	await container.recovery.wait()
	state = await api_client.get(STATE_PATH)
	assert state.text == "done"
	assert [len(batch) for batch in patched] == [100, 20]
	assert patched[0][0] == {
		"op": "add",
		"path": "/user-0",
		"value": {"attributes": {"resource_prefix": "db-0"}, "backend_roles": ["admin"], "password": "pw-0"},
	}


@pytest.mark.asyncio
async def test_restore_reports_failed_state_when_cluster_rejects(api_client: AsyncClient, container, opensearch_handler):
	opensearch_handler["handler"] = lambda request: httpx.Response(500, text="security index unavailable")

	response = await api_client.post(RESTORE_PATH, json=_body(3))

	assert response.status_code == 200
	await container.recovery.wait()
	state = await api_client.get(STATE_PATH)
	assert state.text == "failed"


@pytest.mark.asyncio
async def test_malformed_body_returns_500_with_decode_error(api_client: AsyncClient, container):
	response = await api_client.post(
		RESTORE_PATH,
		content=b'{"connectionProperties": "oops"}',
		headers={"Content-Type": "application/json"},
	)

	assert response.status_code == 500
	assert "connectionProperties" in response.text
	assert container.recovery.get_state().value == "idle"


@pytest.mark.asyncio
async def test_null_connection_properties_finish_done(api_client: AsyncClient, container, opensearch_handler):
	patched: list[bytes] = []

	def handler(request: httpx.Request) -> httpx.Response:
		patched.append(request.content)
		return httpx.Response(200)

	opensearch_handler["handler"] = handler

	response = await api_client.post(RESTORE_PATH, json={"settings": {}, "connectionProperties": None})

	assert response.status_code == 200
	await container.recovery.wait()
	assert (await api_client.get(STATE_PATH)).text == "done"
	assert patched == []


@pytest.mark.asyncio
async def test_v1_prefix_is_served(api_client: AsyncClient):
	response = await api_client.get("/api/v1/dbaas/adapter/opensearch/users/restore-password/state")

	assert response.status_code == 200


@pytest.mark.asyncio
async def test_unknown_api_version_is_not_found(api_client: AsyncClient):
	response = await api_client.get("/api/v9/dbaas/adapter/opensearch/users/restore-password/state")

	assert response.status_code == 404
	assert response.json()["detail"] == "not_found"


@pytest.mark.asyncio
async def test_recovery_endpoints_require_adapter_credentials(api_client: AsyncClient):
	anonymous = await api_client.get(STATE_PATH, auth=None)
	wrong = await api_client.get(STATE_PATH, auth=("dbaas-aggregator", "wrong"))

	assert anonymous.status_code == 401
	assert wrong.status_code == 401
	assert "request_id" in wrong.json()
