from __future__ import annotations

from time import perf_counter
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from waterbill.api.dependencies import build_context
from waterbill.api.error_handlers import register_error_handlers
from waterbill.api.routers.bills import router as bills_router
from waterbill.api.routers.health import router as health_router
from waterbill.api.routers.tariffs import router as tariffs_router
from waterbill.infrastructure.persistence.sqla import SqlTariffRepository
from waterbill.logger import get_logger, reset_request_id, set_request_id, setup_logging
from waterbill.settings import Settings, load_settings


def create_app(
    settings: Settings | None = None,
    *,
    tariffs: SqlTariffRepository | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings)

    app = FastAPI(title="Waterbill API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.ctx = build_context(settings, tariffs=tariffs)

    logger = get_logger()

    @app.middleware("http")
    async def request_log_middleware(request: Request, call_next):
        request_id = (
            str(request.headers.get("x-request-id", "") or "").strip()
            or uuid4().hex[:16]
        )
        token = set_request_id(request_id)
        started = perf_counter()
        req_logger = logger.bind(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (perf_counter() - started) * 1000
            req_logger.bind(status_code=500).opt(exception=True).error(
                f"request failed duration_ms={duration_ms:.2f}"
            )
            reset_request_id(token)
            raise

        duration_ms = (perf_counter() - started) * 1000
        response.headers["X-Request-Id"] = request_id
        status_code = int(response.status_code)
        message = f"{request.method} {request.url.path} status={status_code} duration_ms={duration_ms:.2f}"
        if status_code >= 500:
            req_logger.bind(status_code=status_code).error(message)
        elif status_code >= 400:
            req_logger.bind(status_code=status_code).warning(message)
        else:
            req_logger.bind(status_code=status_code).info(message)
        reset_request_id(token)
        return response

    register_error_handlers(app)

    prefix = "/api/v2"
    app.include_router(health_router, prefix=prefix)
    app.include_router(bills_router, prefix=prefix)
    app.include_router(tariffs_router, prefix=prefix)

    @app.api_route("/api/v2/{rest:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
    async def api_v2_not_found(rest: str) -> Response:
        raise HTTPException(status_code=404, detail=f"route not found: /api/v2/{rest}")

    return app


def serve(settings: Settings | None = None) -> None:
    settings = settings or load_settings()
    setup_logging(settings)
    app = create_app(settings)
    get_logger().info(f"billing API listening on http://{settings.host}:{settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


def main() -> None:
    serve(load_settings())
