# This file builds the FastAPI application and registers the routers of the enabled services.
# Startup opens the shared storage client and shutdown disposes it, so handlers never
# build their own connections.
# The app adds request IDs, timing headers, Prometheus metrics and optional request logging.

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import RequestResponseEndpoint
from starlette.routing import Match

from storefront.api.api_config import ApiConfig, get_api_config
from storefront.api.db_access import DatabaseClient
from storefront.api.error_handlers import StorageFailure, register_error_handlers
from storefront.api.routers.accounts import router as accounts_router
from storefront.api.routers.cart import router as cart_router
from storefront.api.routers.catalog import router as catalog_router
from storefront.api.routers.health import router as health_router
from storefront.api.routers.order_status import router as order_status_router
from storefront.api.routers.orders import router as orders_router
from storefront.api.routers.shipments import router as shipments_router
from storefront.common.logging import configure_logging

LOGGER = logging.getLogger("storefront.api")

API_HTTP_REQUESTS_TOTAL = Counter(
    "storefront_http_requests_total",
    "Total number of HTTP requests processed by the API.",
    ["method", "path", "status_code"],
)
API_HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "storefront_http_request_duration_seconds",
    "API request duration in seconds.",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)
API_HTTP_INFLIGHT_REQUESTS = Gauge(
    "storefront_http_inflight_requests",
    "Number of API requests currently being processed.",
    ["method"],
)

SERVICE_ROUTERS = {
    "accounts": accounts_router,
    "catalog": catalog_router,
    "cart": cart_router,
    "orders": orders_router,
    "shipments": shipments_router,
    "legacy": order_status_router,
}


def _route_label(request: Request) -> str:
    # Path templates keep metric label cardinality bounded.
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", request.url.path)
    return "unmatched"


def create_app(config: ApiConfig | None = None) -> FastAPI:
    """Create configured FastAPI application instance."""

    configure_logging()
    config = config or get_api_config()

    app = FastAPI(
        title=config.api_name,
        description=(
            "Storefront backend: accounts, catalog, cart, orders and shipments. "
            "Every service shares one token format and one authorization guard."
        ),
        version=config.app_version,
        openapi_tags=[
            {"name": "health", "description": "Service liveness, readiness, and version metadata."},
            {"name": "accounts", "description": "Registration, login, and user administration."},
            {"name": "catalog", "description": "Product catalog."},
            {"name": "cart", "description": "Per-user shopping cart."},
            {"name": "orders", "description": "Order lifecycle and ownership rules."},
            {"name": "shipments", "description": "Shipment records."},
            {"name": "legacy", "description": "Unauthenticated order-status lookup."},
        ],
    )

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        method_label = request.method
        path_label = _route_label(request)
        started = time.perf_counter()
        status_code = 500
        API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label).inc()
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            duration_ms = (time.perf_counter() - started) * 1000.0

            response.headers["x-request-id"] = request_id
            response.headers["x-response-time-ms"] = f"{duration_ms:.2f}"

            if config.enable_request_logging:
                LOGGER.info(
                    "request_id=%s method=%s path=%s status=%s duration_ms=%.2f",
                    request_id,
                    request.method,
                    request.url.path,
                    status_code,
                    duration_ms,
                )

            return response
        finally:
            duration_s = time.perf_counter() - started
            API_HTTP_REQUESTS_TOTAL.labels(
                method=method_label,
                path=path_label,
                status_code=str(status_code),
            ).inc()
            API_HTTP_REQUEST_DURATION_SECONDS.labels(
                method=method_label,
                path=path_label,
            ).observe(duration_s)
            API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label).dec()

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.on_event("startup")
    def open_storage() -> None:
        db = DatabaseClient(database_url=config.database_url)
        app.state.db = db
        if config.auto_create_schema:
            try:
                db.ensure_schema()
            except StorageFailure as exc:
                LOGGER.error("schema bootstrap failed: %s", exc.message)
        app.state.db_connected_at_startup = db.can_connect()
        LOGGER.info(
            "started services=%s db_connected=%s",
            ",".join(config.enabled_services),
            app.state.db_connected_at_startup,
        )

    @app.on_event("shutdown")
    def close_storage() -> None:
        db = getattr(app.state, "db", None)
        if db is not None:
            db.close()

    register_error_handlers(app)

    app.include_router(health_router)
    for service, router in SERVICE_ROUTERS.items():
        if config.service_enabled(service):
            app.include_router(router, prefix=config.api_version_path)

    return app


app = create_app()
