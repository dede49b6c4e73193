import pytest
from pydantic import ValidationError

from opensearch_adapter.domain.recovery.models import (
	ADMIN_ROLE_TYPE,
	BackendRoleResolver,
	ConnectionProperties,
	RecoveryRequest,
	RetryPolicy,
	build_changes,
	build_content,
	partition,
)


def test_content_defaults_to_admin_role_and_db_name_prefix():
	properties = ConnectionProperties(username="alice", password="secret", role="", resourcePrefix="", dbName="orders")

	content = build_content(properties, BackendRoleResolver())

	assert list(content.backend_roles) == [ADMIN_ROLE_TYPE]
	assert dict(content.attributes) == {"resource_prefix": "orders"}
	assert content.password == "secret"


def test_content_keeps_explicit_role_and_prefix():
	properties = ConnectionProperties(
		username="bob", password="pw", role="dml", resourcePrefix="tenant-a", dbName="orders"
	)

	content = build_content(properties, BackendRoleResolver())

	assert list(content.backend_roles) == ["dml"]
	assert dict(content.attributes) == {"resource_prefix": "tenant-a"}


def test_backend_roles_follow_configured_mapping():
	resolver = BackendRoleResolver({"admin": ["all_access", "security_manager"]})
	properties = ConnectionProperties(username="carol", password="pw", dbName="db")

	content = build_content(properties, resolver)

	assert list(content.backend_roles) == ["all_access", "security_manager"]
	assert resolver.backend_roles("readonly") == ["readonly"]


def test_changes_preserve_input_order_and_serialize_as_json_patch():
	request = RecoveryRequest.model_validate(
		{
			"connectionProperties": [
				{"username": "first", "password": "p1", "dbName": "db1"},
				{"username": "second", "password": "p2", "role": "readonly", "dbName": "db2"},
			]
		}
	)

	changes = build_changes(request.connection_properties, BackendRoleResolver())

	assert [change.path for change in changes] == ["/first", "/second"]
	assert changes[1].to_dict() == {
		"op": "add",
		"path": "/second",
		"value": {
			"attributes": {"resource_prefix": "db2"},
			"backend_roles": ["readonly"],
			"password": "p2",
		},
	}


@pytest.mark.parametrize(
	("total", "expected_batches", "last_size"),
	[(0, 0, None), (1, 1, 1), (99, 1, 99), (100, 1, 100), (101, 2, 1), (250, 3, 50), (300, 3, 100)],
)
def test_partition_counts(total, expected_batches, last_size):
	batches = list(partition(list(range(total)), 100))

	assert len(batches) == expected_batches
	if last_size is not None:
		assert len(batches[-1]) == last_size
	assert [item for batch in batches for item in batch] == list(range(total))


def test_partition_rejects_non_positive_size():
	with pytest.raises(ValueError):
		list(partition([1, 2], 0))


def test_request_decoding_accepts_missing_optional_fields():
	request = RecoveryRequest.model_validate_json(
		'{"settings": {"x": 1}, "connectionProperties": [{"username": "u", "password": "p", "dbName": "d"}]}'
	)

	assert request.settings == {"x": 1}
	assert request.connection_properties[0].role is None
	assert request.connection_properties[0].resource_prefix is None


def test_request_decoding_treats_null_as_empty():
	assert RecoveryRequest.model_validate_json('{"connectionProperties": null}').connection_properties == []
	assert RecoveryRequest.model_validate_json("null").connection_properties == []


def test_request_decoding_rejects_wrong_types():
	with pytest.raises(ValidationError):
		RecoveryRequest.model_validate_json('{"connectionProperties": [{"username": 5, "password": "p"}]}')


def test_retry_policy_validation():
	assert RetryPolicy() == RetryPolicy(max_attempts=3, delay_seconds=10.0)
	with pytest.raises(ValueError):
		RetryPolicy(max_attempts=0)
	with pytest.raises(ValueError):
		RetryPolicy(delay_seconds=-1)
