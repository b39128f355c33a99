"""Typer CLI for the Kafka service broker."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.table import Table

from kafka_service_broker import __version__
from kafka_service_broker.config.loader import load_settings
from kafka_service_broker.config.models import BrokerSettings
from kafka_service_broker.observability.health import Status, check_broker_health
from kafka_service_broker.observability.logs import configure_logging
from kafka_service_broker.plans.base import PlanName

logger = structlog.get_logger()
console = Console()
err_console = Console(stderr=True)
app = typer.Typer(name="kafka-broker", help="Kafka Service Broker CLI")


def _load(config_path: str | None) -> BrokerSettings:
    if config_path is not None and not Path(config_path).exists():
        err_console.print(f"[red]Config file not found: {config_path}[/red]")
        raise typer.Exit(1)
    try:
        return load_settings(Path(config_path) if config_path else None)
    except ValueError as exc:
        err_console.print(f"[red]Invalid config:[/red] {exc}")
        raise typer.Exit(1) from exc


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"kafka-service-broker v{__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Open Service Broker for Kafka topics."""


@app.command()
def run(
    config_path: str | None = typer.Option(None, "--config", help="Broker YAML"),
) -> None:
    """Run the service broker web app."""
    settings = _load(config_path)
    configure_logging(settings.logging)

    import uvicorn

    from kafka_service_broker.api.app import create_app
    from kafka_service_broker.broker import create_service_broker

    logger.info("broker.starting", version=__version__)
    broker = create_service_broker(settings)
    api = create_app(
        broker,
        settings.broker.username,
        settings.broker.password.get_secret_value(),
        readiness_check=lambda: check_broker_health(settings.kafka),
    )
    logger.info("broker.listening", host=settings.broker.host, port=settings.broker.port)
    uvicorn.run(
        api,
        host=settings.broker.host,
        port=settings.broker.port,
        log_config=None,
    )


@app.command()
def validate(
    config_path: str | None = typer.Option(None, "--config", help="Broker YAML"),
) -> None:
    """Validate the broker configuration and catalog."""
    from kafka_service_broker.broker import create_service_broker

    settings = _load(config_path)
    try:
        broker = create_service_broker(settings)
    except Exception as exc:
        console.print(f"[red]Validation error:[/red] {exc}")
        raise typer.Exit(1) from exc

    console.print("[green]Valid[/green]")
    console.print(f"  kafka:      {settings.kafka.hostnames}")
    console.print(f"  zookeeper:  {settings.kafka.zookeeper_peers}")
    console.print(
        f"  topics:     partitions={settings.kafka.partition_count} "
        f"replication={settings.kafka.replication_factor}"
    )
    console.print(f"  listen:     {settings.broker.host}:{settings.broker.port}")
    console.print(f"  plans:      {', '.join(s.plan for s in broker.registry)}")


@app.command()
def catalog(
    config_path: str | None = typer.Option(None, "--config", help="Broker YAML"),
) -> None:
    """Print the effective catalog, environment overrides applied."""
    from kafka_service_broker.catalog import load_catalog

    settings = _load(config_path)
    doc = load_catalog(settings.catalog.path)

    table = Table(title="Catalog")
    table.add_column("Service", style="cyan")
    table.add_column("Plan")
    table.add_column("Plan ID")
    for service in doc.services:
        for plan in service.plans:
            table.add_row(service.name, plan.name, plan.id)
    console.print(table)


@app.command()
def health(
    config_path: str | None = typer.Option(None, "--config", help="Broker YAML"),
) -> None:
    """Check connectivity to the Kafka cluster."""
    settings = _load(config_path)
    result = check_broker_health(settings.kafka)

    table = Table(title="Broker Health")
    table.add_column("Component", style="cyan")
    table.add_column("Status")
    table.add_column("Detail")

    for c in result.components:
        style = "green" if c.status == Status.HEALTHY else "red"
        table.add_row(c.name, f"[{style}]{c.status}[/{style}]", c.detail)

    console.print(table)
    if not result.healthy:
        raise typer.Exit(1)


@app.command("sanity-test")
def sanity_test(
    plan: PlanName = typer.Argument(..., help="Plan the credentials came from"),
) -> None:
    """Read bind credentials JSON from stdin and check them against Kafka."""
    from kafka_service_broker.sanity import check_credentials

    try:
        creds = json.load(sys.stdin)
    except json.JSONDecodeError as exc:
        err_console.print(f"Failed to unmarshal credentials: {exc}")
        raise typer.Exit(1) from exc
    if not isinstance(creds, dict):
        err_console.print("Failed to unmarshal credentials: expected a JSON object")
        raise typer.Exit(1)
    console.print(f"Loaded credentials: {creds}")

    report = check_credentials(creds, plan)
    for problem in report.problems:
        err_console.print(f"* {problem}")
    if not report.ok:
        raise typer.Exit(report.exit_code)
    console.print(f"[green]Credentials for plan '{plan.value}' look good[/green]")
