"""Aggregator registration and protocol negotiation."""

from opensearch_adapter.domain.registration.client import (
	ComponentHealth,
	RegistrationClient,
	RegistrationConfig,
)
from opensearch_adapter.domain.registration.compat import (
	ApiVersionInfo,
	CompatibilityNegotiator,
	ProtocolVersion,
)

__all__ = [
	"ApiVersionInfo",
	"CompatibilityNegotiator",
	"ComponentHealth",
	"ProtocolVersion",
	"RegistrationClient",
	"RegistrationConfig",
]
