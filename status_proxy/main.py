import logging
import time
from dataclasses import asdict

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from status_proxy.api_schemas import ErrorResponse, HealthResponse, StatusReportResponse
from status_proxy.config import Settings
from status_proxy.cors import JSON_CONTENT_TYPE, response_headers
from status_proxy.runner import run_checks

logger = logging.getLogger(__name__)

ERROR_CODES = {
    404: "not_found",
    405: "method_not_allowed",
}


class StatusJSONResponse(JSONResponse):
    media_type = JSON_CONTENT_TYPE


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="Endpoint Status Proxy",
        version="1.0.0",
        description=(
            "Probes JSON-RPC, Tendermint and TCP endpoints on demand and reports "
            "their UP/DOWN status and latency as JSON."
        ),
        default_response_class=StatusJSONResponse,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.transport = transport
    app.state.started = time.monotonic()

    @app.middleware("http")
    async def cors_headers(request: Request, call_next):
        headers = response_headers(settings.allowed_origins, request.headers.get("origin"))

        if request.method == "OPTIONS":
            return Response(status_code=204, headers=headers)

        if not request.scope.get("path"):
            response = StatusJSONResponse(status_code=400, content={"error": "missing_url"})
        else:
            response = await call_next(request)

        response.headers.update(headers)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(_: Request, exc: StarletteHTTPException):
        code = ERROR_CODES.get(exc.status_code, "http_error")
        return StatusJSONResponse(
            status_code=exc.status_code,
            content={"error": code},
            headers=getattr(exc, "headers", None),
        )

    @app.get(
        "/healthz",
        response_model=HealthResponse,
        tags=["system"],
        summary="Liveness",
        description="Process liveness and uptime; never runs probes.",
    )
    def healthz(request: Request):
        uptime_s = round(time.monotonic() - request.app.state.started)
        return {"ok": True, "uptime_s": max(0, uptime_s)}

    @app.get(
        "/endpoint-status",
        response_model=StatusReportResponse,
        responses={500: {"model": ErrorResponse}},
        tags=["status"],
        summary="Endpoint Status",
        description="Runs every configured check and reports one outcome per check id.",
    )
    async def endpoint_status(request: Request):
        state = request.app.state
        try:
            report = await run_checks(
                state.settings.registry.checks,
                timeout_ms=state.settings.request_timeout_ms,
                transport=state.transport,
            )
        except Exception as exc:
            logger.exception("Status check run failed")
            return StatusJSONResponse(
                status_code=500,
                content={"error": "status_check_failed", "detail": str(exc) or "unknown error"},
            )
        return asdict(report)

    return app


# Settings are read once, in run(); other servers can use
# `uvicorn status_proxy.main:create_app --factory`.
def run() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "endpoint-status-proxy listening on %s:%s (%d checks)",
        settings.bind_host,
        settings.port,
        len(settings.registry.checks),
    )
    uvicorn.run(
        create_app(settings),
        host=settings.bind_host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
