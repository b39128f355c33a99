"""Pydantic configuration models for the service broker."""

from __future__ import annotations

from enum import StrEnum
from typing import Self

from pydantic import BaseModel, Field, SecretStr, model_validator


class KafkaAuthMechanism(StrEnum):
    """Kafka SASL authentication mechanisms."""

    NONE = "none"
    SASL_PLAIN = "sasl_plain"
    SASL_SCRAM_256 = "sasl_scram_256"
    SASL_SCRAM_512 = "sasl_scram_512"


class LogFormat(StrEnum):
    """Structured log renderers."""

    JSON = "json"
    CONSOLE = "console"


class KafkaConfig(BaseModel):
    """Cluster endpoints, topic defaults and admin tuning.

    One bundle per cluster, shared by every plan strategy.  The peer and
    hostname lists are comma-separated and are handed to binding holders
    verbatim.
    """

    zookeeper_peers: str = "localhost:2181"
    hostnames: str = "localhost:9092"
    # Admin request timeout; bounds every exists/create/list/delete call.
    timeout_ms: int = Field(default=1000, ge=1)
    partition_count: int = Field(default=1, ge=1)
    replication_factor: int = Field(default=1, ge=1)
    topic_config: dict[str, str] = Field(default_factory=dict)
    # Deprovision fan-out
    delete_timeout_seconds: float = Field(default=30.0, gt=0)
    sweep_timeout_seconds: float = Field(default=120.0, gt=0)
    delete_max_workers: int = Field(default=8, ge=1)
    # Auth / security
    security_protocol: str = "PLAINTEXT"
    auth_mechanism: KafkaAuthMechanism = KafkaAuthMechanism.NONE
    sasl_username: str | None = None
    sasl_password: SecretStr | None = None
    ssl_ca_location: str | None = None
    ssl_certificate_location: str | None = None
    ssl_key_location: str | None = None

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @model_validator(mode="after")
    def check_auth_requirements(self) -> Self:
        """Validate that SASL credentials are present when SASL is selected."""
        mech = self.auth_mechanism
        if mech != KafkaAuthMechanism.NONE and (
            not self.sasl_username or not self.sasl_password
        ):
            msg = (
                "sasl_username and sasl_password are required "
                f"when auth_mechanism is '{mech.value}'"
            )
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def check_sweep_covers_delete(self) -> Self:
        if self.sweep_timeout_seconds < self.delete_timeout_seconds:
            msg = "sweep_timeout_seconds must be >= delete_timeout_seconds"
            raise ValueError(msg)
        return self


class BrokerConfig(BaseModel):
    """HTTP listener and basic-auth credentials for the OSB API."""

    username: str = "broker"
    password: SecretStr = SecretStr("broker")
    host: str = "0.0.0.0"  # noqa: S104
    port: int = Field(default=8080, ge=1, le=65535)
    # Raise instead of reporting success when a deprovision leaves topics behind.
    fail_on_partial_deprovision: bool = False


class CatalogConfig(BaseModel):
    """Where the OSB catalog document comes from.

    ``path`` replaces the built-in document; the ``BROKER_CATALOG_JSON`` and
    ``BROKER_*_GUID`` environment overrides still apply on top of it.
    """

    path: str | None = None


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: LogFormat = LogFormat.JSON


class BrokerSettings(BaseModel):
    """Process configuration: cluster, listener, catalog, logging."""

    kafka: KafkaConfig = KafkaConfig()
    broker: BrokerConfig = BrokerConfig()
    catalog: CatalogConfig = CatalogConfig()
    logging: LoggingConfig = LoggingConfig()
