"""
Address lookup endpoints
"""

from fastapi import APIRouter, Depends, Request

from ..enrich.lookup import LookupOrchestrator
from ..models import LookupOutcome
from ..schemas.geo import InvalidAddressResponse, LookupResponse
from ..security import TrustedProxies, resolve_caller, resolve_explicit
from .deps import get_orchestrator, get_trusted_proxies

router = APIRouter(tags=["lookup"])

INVALID = {400: {"model": InvalidAddressResponse, "description": "Invalid address"}}


def build_response(result: LookupOutcome) -> LookupResponse:
    return LookupResponse(
        address=str(result.address),
        version=result.address.version,
        outcome=result.outcome,
        datasets=result.datasets,
        asn=result.record.asn,
        place=result.record.place,
        summary=result.summary,
    )


@router.get("/address/{address}", response_model=LookupResponse, responses=INVALID)
async def lookup_address(
    address: str,
    orchestrator: LookupOrchestrator = Depends(get_orchestrator),
):
    """Return geographic and network information for an IP address"""
    return build_response(orchestrator.resolve_record(resolve_explicit(address)))


@router.get("/address/", response_model=LookupResponse, responses=INVALID)
@router.get("/address", response_model=LookupResponse, responses=INVALID, include_in_schema=False)
async def lookup_caller(
    request: Request,
    orchestrator: LookupOrchestrator = Depends(get_orchestrator),
    trusted: TrustedProxies = Depends(get_trusted_proxies),
):
    """Return geographic and network information for the requesting client's address"""
    return build_response(orchestrator.resolve_record(resolve_caller(request, trusted)))
