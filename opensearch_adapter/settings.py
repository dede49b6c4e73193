"""Settings for the OpenSearch DBaaS adapter."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_field(default, *env_names: str):
	if env_names:
		alias = AliasChoices(*env_names) if len(env_names) > 1 else env_names[0]
		return Field(default=default, validation_alias=alias)
	return Field(default=default)


class Settings(BaseSettings):
	# OpenSearch cluster (security plugin REST API)
	opensearch_url: str = _env_field("http://opensearch:9200", "OPENSEARCH_URL")
	opensearch_username: str = _env_field("admin", "OPENSEARCH_USERNAME")
	opensearch_password: str = _env_field("admin", "OPENSEARCH_PASSWORD")
	opensearch_request_timeout_seconds: float = _env_field(30.0, "OPENSEARCH_REQUEST_TIMEOUT_SECONDS")
	opensearch_verify_certs: bool = _env_field(True, "OPENSEARCH_VERIFY_CERTS")

	# DBaaS aggregator registration
	aggregator_url: str = _env_field(
		"http://dbaas-aggregator.dbaas:8080",
		"DBAAS_AGGREGATOR_REGISTRATION_ADDRESS",
		"AGGREGATOR_URL",
	)
	aggregator_username: str = _env_field("cluster-dba", "DBAAS_AGGREGATOR_REGISTRATION_USERNAME")
	aggregator_password: str = _env_field("", "DBAAS_AGGREGATOR_REGISTRATION_PASSWORD")
	adapter_address: str = _env_field("http://dbaas-opensearch-adapter:8080", "DBAAS_ADAPTER_ADDRESS")
	adapter_username: str = _env_field("dbaas-aggregator", "DBAAS_ADAPTER_API_USERNAME")
	adapter_password: str = _env_field("", "DBAAS_ADAPTER_API_PASSWORD")
	physical_database_identifier: str = _env_field("opensearch", "PHYSICAL_DATABASE_IDENTIFIER")
	db_type: str = _env_field("opensearch", "DBAAS_DB_TYPE")
	adapter_labels: Dict[str, str] = _env_field({}, "DBAAS_ADAPTER_LABELS")
	registration_enabled: bool = _env_field(True, "REGISTRATION_ENABLED")
	registration_interval_seconds: float = _env_field(60.0, "REGISTRATION_INTERVAL_SECONDS")
	registration_request_timeout_seconds: float = _env_field(5.0, "REGISTRATION_REQUEST_TIMEOUT_SECONDS")

	# Users recovery
	recovery_batch_size: int = _env_field(100, "RECOVERY_BATCH_SIZE")
	recovery_max_attempts: int = _env_field(3, "RECOVERY_MAX_ATTEMPTS")
	recovery_retry_delay_seconds: float = _env_field(10.0, "RECOVERY_RETRY_DELAY_SECONDS")
	# Role type -> backend roles attached to restored users. Unmapped types map to themselves.
	role_backend_roles: Dict[str, List[str]] = _env_field({}, "ROLE_BACKEND_ROLES")

	# Observability
	environment: str = _env_field("production", "ENV", "APP_ENV", "ENVIRONMENT")
	obs_enabled: bool = _env_field(True, "OBS_ENABLED")
	obs_log_level: str = _env_field("INFO", "LOG_LEVEL")
	obs_log_sampling_rate_info: float = _env_field(1.0, "LOG_SAMPLING_RATE_INFO")
	service_name: str = _env_field("dbaas-opensearch-adapter", "SERVICE_NAME")
	git_commit: str = _env_field("unknown", "GIT_COMMIT", "COMMIT_SHA", "SOURCE_VERSION")
	api_root_path: Optional[str] = _env_field(None, "API_ROOT_PATH")

	model_config = SettingsConfigDict(
		env_prefix="",
		env_file=".env",
		case_sensitive=False,
		extra="ignore",
	)

	@field_validator("aggregator_url", "opensearch_url", "adapter_address", mode="after")
	def _strip_trailing_slash(cls, value: str) -> str:  # type: ignore[override]
		return value.rstrip("/")

	@field_validator("recovery_batch_size", "recovery_max_attempts", mode="after")
	def _positive(cls, value: int) -> int:  # type: ignore[override]
		if value < 1:
			raise ValueError("must be >= 1")
		return value


settings = Settings()


__all__ = ["Settings", "settings"]
