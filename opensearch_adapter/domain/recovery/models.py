"""Data model for restoring users in the OpenSearch security index."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ADMIN_ROLE_TYPE = "admin"
RESOURCE_PREFIX_ATTRIBUTE = "resource_prefix"
ADD_OPERATION = "add"

T = TypeVar("T")


class RecoveryState(str, Enum):
	IDLE = "idle"
	RUNNING = "running"
	FAILED = "failed"
	DONE = "done"


class ConnectionProperties(BaseModel):
	"""Credentials of one tenant user as handed over by the aggregator."""

	model_config = ConfigDict(populate_by_name=True)

	username: str
	password: str
	role: Optional[str] = None
	resource_prefix: Optional[str] = Field(default=None, alias="resourcePrefix")
	db_name: str = Field(default="", alias="dbName")


class RecoveryRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	settings: Optional[Dict[str, Any]] = None
	connection_properties: List[ConnectionProperties] = Field(
		default_factory=list, alias="connectionProperties"
	)

	@model_validator(mode="before")
	@classmethod
	def _null_body(cls, data: Any) -> Any:
		return {} if data is None else data

	@field_validator("connection_properties", mode="before")
	@classmethod
	def _null_properties(cls, value: Any) -> Any:
		return [] if value is None else value


@dataclass(frozen=True)
class Content:
	"""Internal user document as stored by the security plugin."""

	attributes: Mapping[str, str]
	backend_roles: Sequence[str]
	password: str

	def to_dict(self) -> dict[str, Any]:
		return {
			"attributes": dict(self.attributes),
			"backend_roles": list(self.backend_roles),
			"password": self.password,
		}


@dataclass(frozen=True)
class Change:
	"""Single JSON Patch operation against the internal users resource."""

	path: str
	value: Content
	operation: str = ADD_OPERATION

	def to_dict(self) -> dict[str, Any]:
		return {"op": self.operation, "path": self.path, "value": self.value.to_dict()}


@dataclass(frozen=True)
class RetryPolicy:
	max_attempts: int = 3
	delay_seconds: float = 10.0

	def __post_init__(self) -> None:
		if self.max_attempts < 1:
			raise ValueError("max_attempts must be >= 1")
		if self.delay_seconds < 0:
			raise ValueError("delay_seconds must be >= 0")


@dataclass
class BackendRoleResolver:
	"""Maps a role type to the backend roles attached to a restored user."""

	mapping: Mapping[str, Sequence[str]] = field(default_factory=dict)

	def backend_roles(self, role_type: str) -> list[str]:
		roles = self.mapping.get(role_type)
		if roles:
			return list(roles)
		return [role_type]


def build_content(properties: ConnectionProperties, roles: BackendRoleResolver) -> Content:
	role_type = properties.role or ADMIN_ROLE_TYPE
	prefix = properties.resource_prefix or properties.db_name
	return Content(
		attributes={RESOURCE_PREFIX_ATTRIBUTE: prefix},
		backend_roles=tuple(roles.backend_roles(role_type)),
		password=properties.password,
	)


def build_changes(
	connection_properties: Iterable[ConnectionProperties], roles: BackendRoleResolver
) -> list[Change]:
	return [
		Change(path=f"/{properties.username}", value=build_content(properties, roles))
		for properties in connection_properties
	]


def partition(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
	"""Yield consecutive slices of at most ``size`` items, preserving order."""
	if size < 1:
		raise ValueError("size must be >= 1")
	for position in range(0, len(items), size):
		yield items[position : position + size]


__all__ = [
	"ADMIN_ROLE_TYPE",
	"BackendRoleResolver",
	"Change",
	"ConnectionProperties",
	"Content",
	"RecoveryRequest",
	"RecoveryState",
	"RetryPolicy",
	"build_changes",
	"build_content",
	"partition",
]
