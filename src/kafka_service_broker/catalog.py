"""OSB catalog document and plan-identifier resolution.

The built-in catalog ships with the package.  Environment variables can
replace it wholesale or patch individual identifiers:

- ``BROKER_CATALOG_JSON``  a path to a JSON file, or an inline JSON document
- ``BROKER_SERVICE_GUID``  id of the first service
- ``BROKER_SERVICE_NAME``  name of the first service
- ``BROKER_PLAN<i>_GUID``  id of plan *i* of the first service
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from kafka_service_broker.config.defaults import DEFAULTS_DIR
from kafka_service_broker.errors import PlanNotRecognized

logger = structlog.get_logger()

DEFAULT_CATALOG = DEFAULTS_DIR / "catalog.json"


class Plan(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = ""
    name: str = ""
    description: str = ""
    free: bool = True
    metadata: dict[str, Any] | None = None


class Service(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = ""
    name: str = ""
    description: str = ""
    bindable: bool = True
    plan_updateable: bool = False
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None
    plans: list[Plan] = Field(default_factory=list)


class Catalog(BaseModel):
    model_config = ConfigDict(extra="allow")

    services: list[Service] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


def _parse(raw: str, source: str) -> Catalog:
    try:
        return Catalog.model_validate_json(raw)
    except ValidationError as exc:
        msg = f"Invalid catalog ({source}):\n{exc}"
        raise ValueError(msg) from exc


def _is_file(value: str) -> bool:
    try:
        return Path(value).is_file()
    except OSError:
        # ENAMETOOLONG and friends: not a usable path
        return False


def _read_source(
    path: str | Path | None, environ: Mapping[str, str]
) -> tuple[str, str]:
    override = environ.get("BROKER_CATALOG_JSON", "")
    if override:
        if not override.lstrip().startswith(("{", "[")) and _is_file(override):
            return Path(override).read_text(), override
        return override, "$BROKER_CATALOG_JSON"
    p = Path(path) if path is not None else DEFAULT_CATALOG
    if not p.exists():
        msg = f"Catalog file not found: {p}"
        raise FileNotFoundError(msg)
    return p.read_text(), str(p)


def load_catalog(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Catalog:
    """Load the catalog document and apply environment overrides."""
    env = os.environ if environ is None else environ
    raw, source = _read_source(path, env)
    catalog = _parse(raw, source)
    if not catalog.services:
        return catalog

    service = catalog.services[0]
    if env.get("BROKER_SERVICE_GUID"):
        service.id = env["BROKER_SERVICE_GUID"]
    if env.get("BROKER_SERVICE_NAME"):
        service.name = env["BROKER_SERVICE_NAME"]
    for i, plan in enumerate(service.plans):
        guid = env.get(f"BROKER_PLAN{i}_GUID")
        if guid:
            plan.id = guid
    logger.debug("catalog.loaded", source=source, services=len(catalog.services))
    return catalog


class CatalogResolver:
    """Read-only lookups over a loaded catalog."""

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def services(self) -> list[Service]:
        return list(self._catalog.services)

    def plans(self) -> list[Plan]:
        return [plan for service in self._catalog.services for plan in service.plans]

    def plan_name(self, plan_id: str) -> str:
        """Map a caller-visible plan identifier onto its logical plan name."""
        for plan in self.plans():
            if plan.id == plan_id:
                return plan.name
        raise PlanNotRecognized
