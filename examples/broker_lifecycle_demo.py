#!/usr/bin/env python3
"""Runnable demo: drive a running broker through one instance lifecycle.

Prerequisites:
    kafka-broker run     # broker on localhost:8080, Kafka on localhost:9092
    python examples/broker_lifecycle_demo.py
"""

from __future__ import annotations

import sys
import uuid

import httpx
from rich.console import Console

console = Console()

BROKER_URL = "http://localhost:8080"
AUTH = ("broker", "broker")


def main() -> None:
    with httpx.Client(base_url=BROKER_URL, auth=AUTH, timeout=30) as client:
        # 1. Pick the shared plan from the catalog
        resp = client.get("/v2/catalog")
        if resp.status_code != 200:
            console.print("[red]Catalog unavailable:[/red]", resp.text)
            sys.exit(1)
        service = resp.json()["services"][0]
        plan = next(p for p in service["plans"] if p["name"] == "shared")
        console.print(f"[bold]Using plan[/bold] {plan['name']} ({plan['id']})")

        instance_id = f"demo-{uuid.uuid4().hex[:8]}"
        instance = f"/v2/service_instances/{instance_id}"
        body = {"service_id": service["id"], "plan_id": plan["id"]}

        # 2. Provision
        resp = client.put(instance, json=body)
        console.print(f"[green]Provisioned[/green] {instance_id}: {resp.status_code}")

        # 3. Bind and show the credentials an app would receive
        resp = client.put(f"{instance}/service_bindings/demo-binding", json=body)
        console.print("[cyan]Credentials:[/cyan]", resp.json()["credentials"])

        # 4. Unbind and deprovision
        client.delete(
            f"{instance}/service_bindings/demo-binding", params={"plan_id": plan["id"]}
        )
        resp = client.delete(instance, params=body)
        console.print(f"[yellow]Deprovisioned[/yellow]: {resp.json() or 'clean'}")


if __name__ == "__main__":
    main()
