"""Users recovery domain."""

from opensearch_adapter.domain.recovery.engine import RecoveryEngine
from opensearch_adapter.domain.recovery.models import (
	ConnectionProperties,
	RecoveryRequest,
	RecoveryState,
	RetryPolicy,
)

__all__ = ["ConnectionProperties", "RecoveryEngine", "RecoveryRequest", "RecoveryState", "RetryPolicy"]
