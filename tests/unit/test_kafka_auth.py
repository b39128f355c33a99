"""Unit tests for Kafka admin client configuration."""

from __future__ import annotations

from kafka_service_broker.cluster.auth import build_admin_config, build_kafka_auth_config
from kafka_service_broker.config.models import KafkaAuthMechanism, KafkaConfig


class TestBuildKafkaAuthConfig:
    def test_none_returns_empty(self):
        assert build_kafka_auth_config(KafkaConfig()) == {}

    def test_sasl_plain(self):
        config = KafkaConfig(
            auth_mechanism=KafkaAuthMechanism.SASL_PLAIN,
            security_protocol="SASL_SSL",
            sasl_username="user",
            sasl_password="secret",
        )
        result = build_kafka_auth_config(config)
        assert result == {
            "security.protocol": "SASL_SSL",
            "sasl.mechanism": "PLAIN",
            "sasl.username": "user",
            "sasl.password": "secret",
        }

    def test_scram_512_with_ssl_paths(self):
        config = KafkaConfig(
            auth_mechanism=KafkaAuthMechanism.SASL_SCRAM_512,
            security_protocol="SASL_SSL",
            sasl_username="user",
            sasl_password="secret",
            ssl_ca_location="/certs/ca.pem",
            ssl_certificate_location="/certs/client.pem",
            ssl_key_location="/certs/client.key",
        )
        result = build_kafka_auth_config(config)
        assert result["sasl.mechanism"] == "SCRAM-SHA-512"
        assert result["ssl.ca.location"] == "/certs/ca.pem"
        assert result["ssl.certificate.location"] == "/certs/client.pem"
        assert result["ssl.key.location"] == "/certs/client.key"

    def test_scram_256(self):
        config = KafkaConfig(
            auth_mechanism=KafkaAuthMechanism.SASL_SCRAM_256,
            sasl_username="u",
            sasl_password="p",
        )
        assert build_kafka_auth_config(config)["sasl.mechanism"] == "SCRAM-SHA-256"


class TestBuildAdminConfig:
    def test_plaintext(self):
        config = KafkaConfig(hostnames="k1:9092,k2:9092", timeout_ms=2000)
        assert build_admin_config(config) == {
            "bootstrap.servers": "k1:9092,k2:9092",
            "socket.timeout.ms": 2000,
        }

    def test_merges_auth(self):
        config = KafkaConfig(
            auth_mechanism=KafkaAuthMechanism.SASL_PLAIN,
            sasl_username="u",
            sasl_password="p",
        )
        conf = build_admin_config(config)
        assert conf["bootstrap.servers"] == "localhost:9092"
        assert conf["sasl.username"] == "u"
