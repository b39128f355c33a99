"""Open Service Broker exposing Kafka topic lifecycle management."""

__version__ = "0.1.0"
