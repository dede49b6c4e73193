"""Exceptions raised by the adapter's outbound clients."""

from __future__ import annotations


class AdapterError(Exception):
	"""Base class for adapter errors."""

	def __init__(self, detail: str, *, status_code: int = 500) -> None:
		super().__init__(detail)
		self.detail = detail
		self.status_code = status_code


class SecurityApiError(AdapterError):
	"""Raised when the OpenSearch security API rejects a request."""

	def __init__(self, status_code: int, body: str = "") -> None:
		super().__init__(f"security api returned {status_code}: {body}", status_code=status_code)
		self.body = body


__all__ = ["AdapterError", "SecurityApiError"]
