"""Kafka authentication config builder for the admin client."""

from __future__ import annotations

from typing import Any

from kafka_service_broker.config.models import KafkaAuthMechanism, KafkaConfig

_SASL_MECHANISMS = {
    KafkaAuthMechanism.SASL_PLAIN: "PLAIN",
    KafkaAuthMechanism.SASL_SCRAM_256: "SCRAM-SHA-256",
    KafkaAuthMechanism.SASL_SCRAM_512: "SCRAM-SHA-512",
}


def build_kafka_auth_config(config: KafkaConfig) -> dict[str, Any]:
    """Build confluent_kafka config dict entries for authentication.

    Returns a dict of config keys to merge into the AdminClient constructor
    arguments.
    """
    if config.auth_mechanism == KafkaAuthMechanism.NONE:
        return {}

    auth: dict[str, Any] = {
        "security.protocol": config.security_protocol,
        "sasl.mechanism": _SASL_MECHANISMS[config.auth_mechanism],
        "sasl.username": config.sasl_username,
    }
    pw = config.sasl_password.get_secret_value() if config.sasl_password else ""
    auth["sasl.password"] = pw

    # SSL certificate paths
    if config.ssl_ca_location:
        auth["ssl.ca.location"] = config.ssl_ca_location
    if config.ssl_certificate_location:
        auth["ssl.certificate.location"] = config.ssl_certificate_location
    if config.ssl_key_location:
        auth["ssl.key.location"] = config.ssl_key_location

    return auth


def build_admin_config(config: KafkaConfig) -> dict[str, Any]:
    """Full AdminClient configuration for *config*."""
    admin_conf: dict[str, Any] = {
        "bootstrap.servers": config.hostnames,
        "socket.timeout.ms": config.timeout_ms,
    }
    admin_conf.update(build_kafka_auth_config(config))
    return admin_conf
