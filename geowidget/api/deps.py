from fastapi import Request

from ..enrich.lookup import LookupOrchestrator
from ..security import TrustedProxies
from ..services.health import HealthReporter


def get_orchestrator(request: Request) -> LookupOrchestrator:
    return request.app.state.orchestrator


def get_health_reporter(request: Request) -> HealthReporter:
    return request.app.state.health_reporter


def get_trusted_proxies(request: Request) -> TrustedProxies:
    return request.app.state.trusted_proxies
