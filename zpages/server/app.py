"""FastAPI app for /healthz, /readyz and /support/* (quiesce, resume, fail, quit, restart, crash, env, version, loglevel, info).

Sync endpoints run in the worker thread pool, so probes and support actions can
run concurrently; the registry's per-probe locks keep them consistent.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from starlette.background import BackgroundTask
from starlette.requests import ClientDisconnect

from zpages.config.settings import (
    get_logging_config,
    get_server_config,
    get_service_config,
    get_version_config,
)
from zpages.core.errors import PayloadDecodeError, PayloadReadError, SerializationError
from zpages.core.logging_utils import LogContext
from zpages.status.registry import StatusRegistry
from zpages.status.schemas import Info, Version
from zpages.support.controller import ShutdownToken, SupportController
from zpages.support.introspection import build_version, collect_env
from zpages.support.loglevel import LogLevelController

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Origin, X-Requested-With, Content-Type, Accept",
}

# Support actions are method-agnostic
SUPPORT_METHODS = ["GET", "POST", "PUT"]

# Probe reads are logged only from this debug tier up
PROBE_LOG_DEBUG_TIER = 4


def _to_jsonable(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        if hasattr(payload, "to_wire"):
            return payload.to_wire()
        return payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(payload, list):
        return [_to_jsonable(p) for p in payload]
    return payload


def respond(payload: Any, status_code: int = 200, background: Optional[BackgroundTask] = None) -> JSONResponse:
    """JSON response with CORS headers. Serialization failures become a 500 Error body."""
    try:
        return JSONResponse(
            status_code=status_code,
            content=_to_jsonable(payload),
            headers=CORS_HEADERS,
            background=background,
        )
    except (TypeError, ValueError) as e:
        logger.error("response serialization failed: %s", e)
        err = SerializationError(str(e))
        return JSONResponse(status_code=err.status_code, content=err.to_body(), headers=CORS_HEADERS)


def create_app(
    registry: StatusRegistry,
    support: SupportController,
    loglevel: LogLevelController,
    version: Version,
    log_context: LogContext,
) -> FastAPI:
    """Build FastAPI app: probes, support actions, introspection."""
    app = FastAPI(title="zpages", description="Health, readiness and operational support endpoints")

    @app.get("/healthz")
    def healthz() -> JSONResponse:
        """501 forced unhealthy, 202 forced healthy, 200 healthy, 503 otherwise."""
        status, code = registry.health.probe(log_flags=log_context.verbose(PROBE_LOG_DEBUG_TIER))
        return respond(registry.snapshot(health=status), code)

    @app.get("/readyz")
    def readyz() -> JSONResponse:
        """501 forced not ready, 203 forced ready, 200 ready, 503 otherwise."""
        status, code = registry.readiness.probe(log_flags=log_context.verbose(PROBE_LOG_DEBUG_TIER))
        return respond(registry.snapshot(readiness=status), code)

    @app.api_route("/support/quiesce", methods=SUPPORT_METHODS)
    def support_quiesce() -> JSONResponse:
        return respond(support.quiesce())

    @app.api_route("/support/resume", methods=SUPPORT_METHODS)
    def support_resume() -> JSONResponse:
        return respond(support.resume())

    @app.api_route("/support/fail", methods=SUPPORT_METHODS)
    def support_fail() -> JSONResponse:
        return respond(support.fail())

    @app.api_route("/support/quit", methods=SUPPORT_METHODS)
    def support_quit() -> JSONResponse:
        """Force not ready and unhealthy; ask the supervisor to shut down."""
        return respond(support.quit())

    @app.api_route("/support/restart", methods=SUPPORT_METHODS)
    def support_restart() -> JSONResponse:
        return respond(support.restart())

    @app.api_route("/support/crash", methods=SUPPORT_METHODS)
    def support_crash() -> JSONResponse:
        """Write the status body, then terminate the process."""
        return respond(support.crash(), background=BackgroundTask(support.terminate))

    @app.get("/support/env")
    def support_env() -> JSONResponse:
        logger.debug("SupportEnv")
        return respond(collect_env())

    @app.get("/support/version")
    def support_version() -> JSONResponse:
        logger.debug("SupportVersion: %s", version)
        return respond(version)

    @app.get("/support/loglevel")
    def get_loglevel() -> JSONResponse:
        current = loglevel.current()
        logger.debug("SupportLogLevel: logLevel=%s debugLevel=%s logAs=%s", current.log, current.debug, current.format)
        return respond(current)

    @app.put("/support/loglevel")
    async def put_loglevel(request: Request) -> Response:
        """Update {log, debug, format}. 204 when the body cannot be read; an Error body when it cannot be decoded."""
        try:
            raw = await request.body()
        except ClientDisconnect as e:
            err = PayloadReadError(str(e) or "request body could not be read")
            logger.error("SupportLogLevel: %s", err.message)
            # 204 carries no body; the error travels in headers
            return Response(
                status_code=err.status_code,
                media_type="application/json",
                headers={**CORS_HEADERS, "X-Error-Code": err.error_code, "X-Error-Message": err.message},
            )
        try:
            requested = loglevel.decode(raw)
        except PayloadDecodeError as e:
            logger.error("SupportLogLevel: %s: %s", e.message, e.details)
            return respond(e.to_body(), e.status_code)
        return respond(loglevel.update(requested))

    @app.get("/support/info")
    def support_info() -> JSONResponse:
        """Version, status, environment and log level in one body."""
        return respond(
            Info(
                version=version,
                status=registry.snapshot(),
                env=collect_env(),
                log_level=loglevel.current(),
            )
        )

    return app


def build_app(
    config: Dict[str, Any],
    log_context: Optional[LogContext] = None,
    shutdown: Optional[ShutdownToken] = None,
    environ: Optional[Dict[str, str]] = None,
) -> FastAPI:
    """Wire registry, controllers and app from config. Components are exposed on app.state."""
    log_context = log_context or LogContext()
    log_cfg = get_logging_config(config, environ=environ)
    level, debug, fmt = log_context.apply(log_cfg["level"], log_cfg["debug"], log_cfg["format"])

    version_cfg = get_version_config(config)
    version = build_version(version_cfg["module"], version_cfg["version"], version_cfg["dependencies"])

    service_cfg = get_service_config(config)
    registry = StatusRegistry(
        name=service_cfg["name"],
        uri=service_cfg["uri"],
        service_type=service_cfg["type"],
        guid=service_cfg["guid"],
        log_fields={"app": version.module, "version": version.version},
    )
    support = SupportController(registry, log_context, shutdown=shutdown)
    loglevel = LogLevelController(log_context)

    app = create_app(registry, support, loglevel, version, log_context)
    app.state.registry = registry
    app.state.support = support
    app.state.loglevel = loglevel
    app.state.log_context = log_context
    app.state.shutdown = support.shutdown

    logger.info(
        "zpages initialized logLevel=%s debugLevel=%s logAs=%s guid=%s uri=%s",
        level.value, debug, fmt.value, registry.guid, registry.uri,
    )
    return app


def run_server(config: Dict[str, Any]) -> None:
    """Start the zpages server (host/port from config) under the supervisor; returns once it stops."""
    from zpages.server.supervisor import Supervisor

    app = build_app(config)
    server_cfg = get_server_config(config)
    supervisor = Supervisor(app, server_cfg["host"], server_cfg["port"], app.state.shutdown)
    logger.info("zpages server on %s:%s", server_cfg["host"], server_cfg["port"])
    supervisor.run()
