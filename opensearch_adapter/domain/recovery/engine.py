"""Background users recovery against the OpenSearch security API.

A recovery run rebuilds every user listed in the request through bulk JSON
Patch calls. Runs are accept-and-continue: :meth:`RecoveryEngine.trigger`
returns as soon as the job is scheduled and callers poll
:meth:`RecoveryEngine.get_state` for the outcome. Only one run can be in
flight; triggers received while a run is active are dropped.

Batches are applied strictly in order. A batch that keeps failing after the
retry policy is exhausted fails the whole run, and batches applied before it
stay applied.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Mapping, Optional, Sequence

from opensearch_adapter.domain.recovery.models import (
	BackendRoleResolver,
	Change,
	ConnectionProperties,
	RecoveryRequest,
	RecoveryState,
	RetryPolicy,
	build_changes,
	partition,
)
from opensearch_adapter.infra.security_api import SecurityApiClient
from opensearch_adapter.obs import metrics

_LOG = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100
_STATES = tuple(state.value for state in RecoveryState)


class RecoveryEngine:
	"""Owns the recovery state and the single in-flight recovery task."""

	def __init__(
		self,
		client: SecurityApiClient,
		*,
		policy: RetryPolicy | None = None,
		batch_size: int = DEFAULT_BATCH_SIZE,
		backend_roles: Mapping[str, Sequence[str]] | None = None,
		call_timeout: float | None = None,
	) -> None:
		if batch_size < 1:
			raise ValueError("batch_size must be >= 1")
		self._client = client
		self.policy = policy or RetryPolicy()
		self.batch_size = batch_size
		self.roles = BackendRoleResolver(dict(backend_roles or {}))
		self.call_timeout = call_timeout
		self._state = RecoveryState.IDLE
		self._lock = asyncio.Lock()
		self._task: Optional[asyncio.Task] = None
		metrics.set_recovery_state(self._state.value, states=_STATES)

	def get_state(self) -> RecoveryState:
		return self._state

	@property
	def task(self) -> Optional[asyncio.Task]:
		return self._task

	async def trigger(self, request: RecoveryRequest) -> bool:
		"""Start a recovery run unless one is already running.

		Returns ``True`` when a new run was scheduled.
		"""
		async with self._lock:
			if self._state is RecoveryState.RUNNING:
				_LOG.info("recovery.trigger_ignored", extra={"reason": "already_running"})
				return False
			self._set_state(RecoveryState.RUNNING)
			properties = list(request.connection_properties)
			self._task = asyncio.create_task(self._run(properties), name="users-recovery")
			self._task.add_done_callback(self._settle_cancelled)
		_LOG.info("recovery.started", extra={"users": len(properties)})
		return True

	async def wait(self) -> RecoveryState:
		"""Wait for the in-flight run, if any, and return the resulting state."""
		task = self._task
		if task is not None and not task.done():
			await asyncio.wait({task})
		if task is not None:
			self._settle_cancelled(task)
		return self._state

	def cancel(self) -> bool:
		task = self._task
		if task is None or task.done():
			return False
		return task.cancel()

	async def shutdown(self) -> None:
		self.cancel()
		await self.wait()

	def _settle_cancelled(self, task: asyncio.Task) -> None:
		# A task cancelled before its first step never enters _run's finally.
		if task is not self._task or not task.cancelled():
			return
		if self._state is not RecoveryState.RUNNING:
			return
		_LOG.warning("recovery.cancelled", extra={"started": False})
		self._set_state(RecoveryState.FAILED)
		metrics.record_recovery_run(RecoveryState.FAILED.value)

	async def _run(self, properties: list[ConnectionProperties]) -> None:
		start = time.perf_counter()
		result = RecoveryState.FAILED
		try:
			changes = build_changes(properties, self.roles)
			for index, batch in enumerate(partition(changes, self.batch_size)):
				_LOG.debug("recovery.batch", extra={"batch": index, "size": len(batch)})
				try:
					await self._apply_with_retry(batch)
				except Exception as exc:
					_LOG.error(
						"recovery.failed",
						extra={"batch": index, "error": str(exc), "error_type": type(exc).__name__},
					)
					return
			result = RecoveryState.DONE
			_LOG.info("recovery.done", extra={"users": len(changes)})
		except asyncio.CancelledError:
			_LOG.warning("recovery.cancelled")
			raise
		finally:
			self._set_state(result)
			metrics.record_recovery_run(result.value, duration_seconds=time.perf_counter() - start)

	async def _apply_with_retry(self, batch: Sequence[Change]) -> None:
		attempts = self.policy.max_attempts
		for attempt in range(1, attempts + 1):
			try:
				await self._patch(batch)
			except Exception as exc:
				metrics.inc_batch_attempt("error")
				_LOG.warning(
					"recovery.batch_attempt_failed",
					extra={"attempt": attempt, "max_attempts": attempts, "error": str(exc)},
				)
				if attempt == attempts:
					raise
				await asyncio.sleep(self.policy.delay_seconds)
			else:
				metrics.inc_batch_attempt("ok")
				return

	async def _patch(self, batch: Sequence[Change]) -> None:
		if self.call_timeout is None:
			await self._client.patch_users(batch)
			return
		await asyncio.wait_for(self._client.patch_users(batch), timeout=self.call_timeout)

	def _set_state(self, state: RecoveryState) -> None:
		self._state = state
		metrics.set_recovery_state(state.value, states=_STATES)


__all__ = ["DEFAULT_BATCH_SIZE", "RecoveryEngine"]
