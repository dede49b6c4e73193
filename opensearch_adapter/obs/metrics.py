"""Prometheus metrics used across the adapter."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

REQUEST_COUNTER = Counter(
	"dbaas_adapter_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"dbaas_adapter_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

RECOVERY_RUNS = Counter(
	"dbaas_adapter_recovery_runs_total",
	"Users recovery runs by final result",
	["result"],
)

RECOVERY_DURATION = Histogram(
	"dbaas_adapter_recovery_duration_seconds",
	"Users recovery run duration in seconds",
	buckets=(0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0),
)

RECOVERY_BATCH_ATTEMPTS = Counter(
	"dbaas_adapter_recovery_batch_attempts_total",
	"Bulk patch attempts issued by users recovery",
	["result"],
)

RECOVERY_STATE = Gauge(
	"dbaas_adapter_recovery_state",
	"Current users recovery state (1 for the active state)",
	["state"],
)

REGISTRATION_ATTEMPTS = Counter(
	"dbaas_adapter_registration_attempts_total",
	"Registration attempts against the DBaaS aggregator",
	["status"],
)

PROTOCOL_VERSION = Gauge(
	"dbaas_adapter_protocol_version",
	"Protocol version negotiated with the DBaaS aggregator",
)


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def set_recovery_state(state: str, *, states: tuple[str, ...]) -> None:
	for name in states:
		RECOVERY_STATE.labels(state=name).set(1 if name == state else 0)


def record_recovery_run(result: str, *, duration_seconds: float | None = None) -> None:
	RECOVERY_RUNS.labels(result=result).inc()
	if duration_seconds is not None:
		RECOVERY_DURATION.observe(duration_seconds)


def inc_batch_attempt(result: str) -> None:
	RECOVERY_BATCH_ATTEMPTS.labels(result=result).inc()


def inc_registration(status: str) -> None:
	REGISTRATION_ATTEMPTS.labels(status=status).inc()


def set_protocol_version(version: int) -> None:
	PROTOCOL_VERSION.set(version)
