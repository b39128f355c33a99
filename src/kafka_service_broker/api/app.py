"""Open Service Broker v2 HTTP routes."""

from __future__ import annotations

import secrets
from collections.abc import Callable
from typing import Any

import structlog
from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel, ConfigDict

from kafka_service_broker.broker import ServiceBroker
from kafka_service_broker.errors import BrokerError
from kafka_service_broker.observability.health import BrokerHealth

logger = structlog.get_logger()

_basic = HTTPBasic()

ReadinessCheck = Callable[[], BrokerHealth]


class ProvisionRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    service_id: str = ""
    plan_id: str = ""
    parameters: dict[str, Any] | None = None


class BindRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    service_id: str = ""
    plan_id: str = ""
    app_guid: str | None = None
    parameters: dict[str, Any] | None = None


class UpdateRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    service_id: str = ""
    plan_id: str | None = None
    parameters: dict[str, Any] | None = None


# ---------- dependency helpers -------------------------------------------------
def _get_broker(request: Request) -> ServiceBroker:
    return request.app.state.broker  # type: ignore[no-any-return]


def _require_auth(
    request: Request, credentials: HTTPBasicCredentials = Depends(_basic)
) -> str:
    expected_user, expected_password = request.app.state.credentials
    user_ok = secrets.compare_digest(
        credentials.username.encode(), expected_user.encode()
    )
    password_ok = secrets.compare_digest(
        credentials.password.encode(), expected_password.encode()
    )
    if not (user_ok and password_ok):
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED,
            "invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username


async def _broker_error_handler(request: Request, exc: BrokerError) -> JSONResponse:
    logger.warning(
        "api.request_failed",
        method=request.method,
        path=request.url.path,
        status=exc.status_code,
        error=exc.description,
    )
    return JSONResponse(
        status_code=exc.status_code, content={"description": exc.description}
    )


def create_app(
    broker: ServiceBroker,
    username: str,
    password: str,
    readiness_check: ReadinessCheck | None = None,
) -> FastAPI:
    """Build the OSB application around *broker*."""
    app = FastAPI(title="Kafka Service Broker")
    app.state.broker = broker
    app.state.credentials = (username, password)
    app.add_exception_handler(BrokerError, _broker_error_handler)  # type: ignore[arg-type]

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/readyz")
    def readyz() -> JSONResponse:
        if readiness_check is None:
            return JSONResponse({"status": "ok"})
        health = readiness_check()
        code = (
            status.HTTP_200_OK
            if health.healthy
            else status.HTTP_503_SERVICE_UNAVAILABLE
        )
        return JSONResponse(status_code=code, content=health.summary)

    @app.get("/v2/catalog", dependencies=[Depends(_require_auth)])
    def catalog(svc: ServiceBroker = Depends(_get_broker)) -> dict[str, Any]:
        return {"services": [s.model_dump(exclude_none=True) for s in svc.services()]}

    @app.put(
        "/v2/service_instances/{instance_id}",
        status_code=status.HTTP_201_CREATED,
        dependencies=[Depends(_require_auth)],
    )
    def provision(
        instance_id: str,
        body: ProvisionRequest,
        svc: ServiceBroker = Depends(_get_broker),
    ) -> dict[str, Any]:
        svc.provision(instance_id, body.plan_id)
        return {}

    @app.patch(
        "/v2/service_instances/{instance_id}",
        dependencies=[Depends(_require_auth)],
    )
    def update(
        instance_id: str,
        body: UpdateRequest,
        svc: ServiceBroker = Depends(_get_broker),
    ) -> dict[str, Any]:
        svc.update(instance_id, body.plan_id)
        return {}

    @app.delete(
        "/v2/service_instances/{instance_id}",
        dependencies=[Depends(_require_auth)],
    )
    def deprovision(
        instance_id: str,
        service_id: str = Query(default=""),
        plan_id: str = Query(default=""),
        svc: ServiceBroker = Depends(_get_broker),
    ) -> dict[str, Any]:
        report = svc.deprovision(instance_id)
        if report.complete:
            return {}
        failed = ", ".join(sorted(report.failed))
        return {
            "description": (
                f"deleted {report.succeeded_count} of {report.attempted_count} "
                f"topic(s); failed: {failed}"
            )
        }

    @app.get(
        "/v2/service_instances/{instance_id}/last_operation",
        dependencies=[Depends(_require_auth)],
    )
    def last_operation(
        instance_id: str, svc: ServiceBroker = Depends(_get_broker)
    ) -> dict[str, str]:
        return svc.last_operation(instance_id)

    @app.put(
        "/v2/service_instances/{instance_id}/service_bindings/{binding_id}",
        status_code=status.HTTP_201_CREATED,
        dependencies=[Depends(_require_auth)],
    )
    def bind(
        instance_id: str,
        binding_id: str,
        body: BindRequest,
        svc: ServiceBroker = Depends(_get_broker),
    ) -> dict[str, Any]:
        return {"credentials": svc.bind(instance_id, binding_id, body.plan_id)}

    @app.delete(
        "/v2/service_instances/{instance_id}/service_bindings/{binding_id}",
        dependencies=[Depends(_require_auth)],
    )
    def unbind(
        instance_id: str,
        binding_id: str,
        service_id: str = Query(default=""),
        plan_id: str = Query(default=""),
        svc: ServiceBroker = Depends(_get_broker),
    ) -> dict[str, Any]:
        svc.unbind(instance_id, binding_id, plan_id)
        return {}

    return app
