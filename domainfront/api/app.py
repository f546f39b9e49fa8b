"""FastAPI application factory and entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import FastAPI

from domainfront import __version__
from domainfront.api.middleware import CorrelationIdMiddleware, add_exception_handlers
from domainfront.api.routes import connect, domains, orders, payments, search, system
from domainfront.challenge import ChallengeGate, HmacSigner
from domainfront.clients.doh import DohClient
from domainfront.clients.paystack import PaystackClient
from domainfront.clients.whmcs import WhmcsClient
from domainfront.config import Settings
from domainfront.connection import ConnectionEvaluator
from domainfront.logging import configure_logging
from domainfront.orders import OrderService
from domainfront.registrar import Registrar

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = structlog.get_logger()


def init_state(app: FastAPI, settings: Settings) -> None:
    """Build the process-wide services once and attach them to app state."""
    target = settings.platform_target()
    dns = DohClient(base_url=settings.doh_url, timeout=settings.dns_timeout)
    whmcs = WhmcsClient(
        api_url=settings.whmcs_api_url,
        identifier=settings.whmcs_api_identifier,
        secret=settings.whmcs_api_secret,
        access_key=settings.whmcs_api_access_key,
        timeout=settings.http_timeout,
    )

    app.state.settings = settings
    app.state.dns = dns
    app.state.challenge_gate = ChallengeGate(HmacSigner(settings.effective_challenge_secret))
    app.state.evaluator = ConnectionEvaluator(dns, target)
    app.state.registrar = Registrar(whmcs, dns)
    app.state.orders = OrderService(whmcs, target.nameservers)
    app.state.paystack = PaystackClient(
        secret_key=settings.paystack_secret_key,
        base_url=settings.paystack_base_url,
        currency=settings.paystack_currency,
        timeout=settings.http_timeout,
    )


def include_routes(app: FastAPI) -> None:
    app.include_router(system.router)
    app.include_router(search.router)
    app.include_router(domains.router)
    app.include_router(connect.router)
    app.include_router(payments.router)
    app.include_router(orders.router)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load settings and wire services on startup."""
    settings = Settings()
    configure_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
    )
    init_state(app, settings)
    if not settings.challenge_secret:
        logger.warning("CHALLENGE_SECRET not set, falling back to a derived secret")

    logger.info("Domainfront API started", host=settings.api_host, port=settings.api_port)
    yield
    logger.info("Domainfront API shut down")


def create_app() -> FastAPI:
    """Application factory."""
    app = FastAPI(
        title="Domainfront",
        description="Domain registration storefront API",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(CorrelationIdMiddleware)
    add_exception_handlers(app)

    # Prometheus metrics endpoint
    from prometheus_client import make_asgi_app

    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    include_routes(app)
    return app


def main() -> None:
    """Entry point for `domainfront-api` command."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "domainfront.api.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
    )
