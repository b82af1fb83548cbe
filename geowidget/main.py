import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.address import router as address_router
from .api.health import router as health_router
from .api.prometheus import router as prometheus_router
from .config import API_VERSION, ServiceConfig
from .enrich.lookup import LookupOrchestrator
from .enrich.registry import DatabaseRegistry
from .errors import InvalidAddress
from .logging_config import setup_logging
from .middleware import TracingMiddleware
from .models import OutcomeKind
from .security import TrustedProxies
from .services.health import HealthReporter

logger = logging.getLogger("geowidget")


def _bind_registry(application: FastAPI, registry: DatabaseRegistry, config: ServiceConfig):
    application.state.registry = registry
    application.state.orchestrator = LookupOrchestrator(registry)
    application.state.health_reporter = HealthReporter(registry, require_all=config.require_all)


def create_app(config: Optional[ServiceConfig] = None,
               registry: Optional[DatabaseRegistry] = None) -> FastAPI:
    """Build the HTTP surface.

    When no registry is supplied the datasets are opened in the lifespan
    startup phase, which finishes before the server accepts any request.
    """
    config = config or ServiceConfig.from_env()

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        owned = None
        if getattr(application.state, "registry", None) is None:
            owned = DatabaseRegistry.initialize(config.dataset_paths())
            _bind_registry(application, owned, config)

        health = application.state.health_reporter.report()
        logger.info("geowidget ready", extra={
            "component": "api",
            "datasets": {kind.value: loaded for kind, loaded in health.datasets.items()},
            "trusted_proxies": len(application.state.trusted_proxies.networks),
        })
        try:
            yield
        finally:
            if owned is not None:
                owned.close()
            logger.info("geowidget shutting down", extra={"component": "api"})

    application = FastAPI(
        title="geowidget",
        description="Geographic and network information for IP addresses.",
        version=API_VERSION,
        lifespan=lifespan,
    )
    application.state.config = config
    application.state.registry = None
    application.state.trusted_proxies = TrustedProxies(config.trusted_proxies)
    if registry is not None:
        _bind_registry(application, registry, config)

    application.add_middleware(TracingMiddleware)

    @application.exception_handler(InvalidAddress)
    async def invalid_address_handler(request: Request, exc: InvalidAddress):
        return JSONResponse(status_code=400, content={
            "outcome": OutcomeKind.INVALID_ADDRESS.value,
            "address": exc.raw if isinstance(exc.raw, str) else None,
            "detail": exc.reason,
        })

    application.include_router(address_router)
    application.include_router(health_router)
    application.include_router(prometheus_router)
    return application


# `uvicorn geowidget.main:app` skips __main__, so configure logging on import
setup_logging()
app = create_app()
